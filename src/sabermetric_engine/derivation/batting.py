import logging

from sabermetric_engine.derivation.context import check_context, park_runs_factor
from sabermetric_engine.derivation.rates import (
    babip,
    hr_per_fb,
    safe_div,
    slash_line,
    strikeout_rate,
    walk_rate,
    woba,
)
from sabermetric_engine.domain.batting_stats import AdvancedBattingStats, BattingLine
from sabermetric_engine.domain.constants import SeasonConstants
from sabermetric_engine.domain.context import StatContext
from sabermetric_engine.domain.park_factor import ParkFactor

logger = logging.getLogger(__name__)


def weighted_runs_created_plus(wraa: float, pa: int, league_runs_per_pa: float, park_factor: float) -> float | None:
    """wRC+ on the 100 = league-average scale, park-adjusted.

    None when there are no plate appearances or no league run environment.
    """
    if pa == 0 or league_runs_per_pa == 0:
        return None
    park_adjustment = league_runs_per_pa - park_factor / 100 * league_runs_per_pa
    return 100 * ((wraa / pa + league_runs_per_pa) + park_adjustment) / league_runs_per_pa


def derive_batting(
    player_id: str,
    line: BattingLine,
    context: StatContext,
    constants: SeasonConstants,
    park_factor: ParkFactor | None = None,
    *,
    team_id: str | None = None,
) -> AdvancedBattingStats:
    """Derive rate and run-value metrics from a batting counting line.

    Zero denominators produce 0.0 rates; wRC+ is None without plate
    appearances.
    """
    check_context(context, constants, park_factor)
    weights = constants.woba
    slash = slash_line(line)
    woba_value = woba(line, weights)
    wraa = safe_div(woba_value - constants.league_woba, weights.woba_scale) * line.pa
    runs_per_pa = constants.runs_per_pa
    wrc = wraa + runs_per_pa * line.pa
    wrc_plus = weighted_runs_created_plus(wraa, line.pa, runs_per_pa, park_runs_factor(park_factor))

    logger.debug("Derived batting for %s (%d): wOBA=%.3f wRC+=%s", player_id, context.season, woba_value, wrc_plus)
    return AdvancedBattingStats(
        player_id=player_id,
        context=context,
        line=line,
        avg=slash.avg,
        obp=slash.obp,
        slg=slash.slg,
        ops=slash.ops,
        iso=slash.iso,
        babip=babip(line),
        k_rate=strikeout_rate(line),
        bb_rate=walk_rate(line),
        woba=woba_value,
        wraa=wraa,
        wrc=wrc,
        wrc_plus=wrc_plus,
        hr_fb=hr_per_fb(line),
        team_id=team_id,
    )
