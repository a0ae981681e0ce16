import logging
from collections.abc import Callable

from sabermetric_engine.domain.constants import SeasonConstants
from sabermetric_engine.domain.context import StatContext, StatProvider
from sabermetric_engine.domain.pitching_stats import AdvancedPitchingStats
from sabermetric_engine.domain.war import PlayerWARSummary, WARComponent
from sabermetric_engine.exceptions import ConstantsUnavailable, InvalidContext

logger = logging.getLogger(__name__)

DEFAULT_PITCHER_REPLACEMENT_RUNS_PER_9 = 1.0

# (pitcher's run metric, league baseline on the same scale)
type PitcherBasis = Callable[[AdvancedPitchingStats, SeasonConstants], tuple[float, float | None]]


def _fip_basis(stats: AdvancedPitchingStats, constants: SeasonConstants) -> tuple[float, float | None]:
    return stats.fip, constants.league.era if constants.league is not None else None


def _ra9_basis(stats: AdvancedPitchingStats, constants: SeasonConstants) -> tuple[float, float | None]:
    return stats.ra9, constants.league.ra9 if constants.league is not None else None


PITCHER_STRATEGIES: dict[StatProvider, PitcherBasis] = {
    StatProvider.FANGRAPHS: _fip_basis,
    StatProvider.INTERNAL: _fip_basis,
    StatProvider.BBREF: _ra9_basis,
}


class WARAggregator:
    """Combines component run values into wins above replacement.

    Components that the caller does not supply count as zero runs and are
    left out of ``components_present``.
    """

    def __init__(self, *, pitcher_replacement_runs_per_9: float = DEFAULT_PITCHER_REPLACEMENT_RUNS_PER_9) -> None:
        self._pitcher_replacement_runs_per_9 = pitcher_replacement_runs_per_9

    def aggregate(
        self,
        *,
        player_id: str,
        context: StatContext,
        runs_per_win: float,
        batting_runs: float | None = None,
        baserunning_runs: float | None = None,
        fielding_runs: float | None = None,
        positional_runs: float | None = None,
        league_adjustment: float | None = None,
        replacement_runs: float | None = None,
        team_id: str | None = None,
    ) -> PlayerWARSummary:
        if runs_per_win <= 0:
            raise InvalidContext(f"Runs per win must be positive, got {runs_per_win}")
        components = {
            WARComponent.BATTING: batting_runs,
            WARComponent.BASERUNNING: baserunning_runs,
            WARComponent.FIELDING: fielding_runs,
            WARComponent.POSITIONAL: positional_runs,
            WARComponent.LEAGUE_ADJUSTMENT: league_adjustment,
            WARComponent.REPLACEMENT: replacement_runs,
        }
        present = frozenset(name for name, runs in components.items() if runs is not None)
        total_runs = sum(runs for runs in components.values() if runs is not None)
        war = total_runs / runs_per_win

        logger.debug("WAR for %s: %.1f runs / %.2f = %.2f", player_id, total_runs, runs_per_win, war)
        return PlayerWARSummary(
            player_id=player_id,
            context=context,
            war=war,
            runs_per_win=runs_per_win,
            components_present=present,
            batting_runs=batting_runs,
            baserunning_runs=baserunning_runs,
            fielding_runs=fielding_runs,
            positional_runs=positional_runs,
            league_adjustment=league_adjustment,
            replacement_runs=replacement_runs,
            team_id=team_id,
        )

    def aggregate_pitcher(
        self,
        stats: AdvancedPitchingStats,
        constants: SeasonConstants,
        *,
        provider: StatProvider | None = None,
    ) -> PlayerWARSummary:
        """Pitcher WAR from runs saved against the league baseline.

        The provider (default: the stats' own context provider) picks the run
        metric: FIP for FanGraphs-style and internal lines, RA9 for
        Baseball-Reference-style lines.
        """
        provider = provider or stats.context.provider
        strategy = PITCHER_STRATEGIES.get(provider)
        if strategy is None:
            raise InvalidContext(f"No pitcher WAR strategy for provider '{provider}'")
        runs_per_win = constants.runs_per_win
        if runs_per_win <= 0:
            raise InvalidContext(f"Runs per win must be positive, got {runs_per_win}")

        innings = stats.line.innings_pitched
        metric, league_baseline = strategy(stats, constants)
        if league_baseline is None:
            league = constants.league.league if constants.league is not None else None
            raise ConstantsUnavailable(constants.season, league)

        rar = (league_baseline - metric) / 9 * innings + self._pitcher_replacement_runs_per_9 * innings / 9
        war = rar / runs_per_win
        logger.debug("Pitcher WAR for %s (%s): RAR=%.1f WAR=%.2f", stats.player_id, provider, rar, war)
        return PlayerWARSummary(
            player_id=stats.player_id,
            context=stats.context,
            war=war,
            runs_per_win=runs_per_win,
            components_present=frozenset(),
            pitching_rar=rar,
            team_id=stats.team_id,
        )
