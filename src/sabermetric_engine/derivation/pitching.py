import logging

from sabermetric_engine.derivation.context import check_context, park_runs_factor
from sabermetric_engine.derivation.rates import fip_core, per_nine, safe_div
from sabermetric_engine.domain.constants import SeasonConstants
from sabermetric_engine.domain.context import StatContext
from sabermetric_engine.domain.park_factor import ParkFactor
from sabermetric_engine.domain.pitching_stats import AdvancedPitchingStats, PitchingLine

logger = logging.getLogger(__name__)


def _era_plus(era: float, league_era: float | None, park_factor: float) -> float | None:
    if not league_era or era == 0:
        return None
    return 100 * league_era * (park_factor / 100) / era


def _minus(value: float | None, league_era: float | None, park_factor: float) -> float | None:
    """FIP-/xFIP- style index: 100 is average, lower is better."""
    if value is None or not league_era:
        return None
    return 100 * (value + (value - value * park_factor / 100)) / league_era


def derive_pitching(
    player_id: str,
    line: PitchingLine,
    context: StatContext,
    constants: SeasonConstants,
    park_factor: ParkFactor | None = None,
    *,
    team_id: str | None = None,
) -> AdvancedPitchingStats:
    """Derive per-inning rates, FIP/xFIP and league-relative indices.

    A line with no outs recorded yields 0.0 rates and no indices. xFIP needs
    both a fly-ball count and the season's league HR/FB rate.
    """
    check_context(context, constants, park_factor)
    weights = constants.woba
    outs = line.ip_outs
    pf = park_runs_factor(park_factor)
    league_era = constants.league.era if constants.league is not None else None

    era = per_nine(line.er, outs)
    fip = fip_core(line.hr, line.bb, line.hbp, line.so, outs) + weights.c_fip if outs else 0.0
    xfip: float | None = None
    if outs and line.fb is not None and weights.lg_hr_per_fb is not None:
        expected_hr = line.fb * weights.lg_hr_per_fb
        xfip = fip_core(expected_hr, line.bb, line.hbp, line.so, outs) + weights.c_fip

    logger.debug("Derived pitching for %s (%d): ERA=%.2f FIP=%.2f", player_id, context.season, era, fip)
    return AdvancedPitchingStats(
        player_id=player_id,
        context=context,
        line=line,
        era=era,
        whip=safe_div(3 * (line.bb + line.h), outs),
        k_per_9=per_nine(line.so, outs),
        bb_per_9=per_nine(line.bb, outs),
        hr_per_9=per_nine(line.hr, outs),
        ra9=per_nine(line.r, outs),
        fip=fip,
        xfip=xfip,
        era_plus=_era_plus(era, league_era, pf) if outs else None,
        fip_minus=_minus(fip, league_era, pf) if outs else None,
        xfip_minus=_minus(xfip, league_era, pf),
        team_id=team_id,
    )
