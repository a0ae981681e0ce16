"""Run-value estimators for the individual WAR components."""

from sabermetric_engine.domain.batting_stats import AdvancedBattingStats
from sabermetric_engine.domain.constants import SeasonConstants, WOBAConstant
from sabermetric_engine.domain.war import PlayerWARSummary
from sabermetric_engine.exceptions import InvalidContext
from sabermetric_engine.war.aggregator import WARAggregator

# Runs per 162 games played at the position.
POSITIONAL_ADJUSTMENTS: dict[str, float] = {
    "C": 12.5,
    "1B": -12.5,
    "2B": 2.5,
    "3B": 2.5,
    "SS": 7.5,
    "LF": -7.5,
    "CF": 2.5,
    "RF": -7.5,
    "DH": -17.5,
    "P": 0.0,
}

DEFAULT_REPLACEMENT_RUNS_PER_PA = -20 / 600
DEFAULT_FIELDING_RUNS_PER_PLAY = 0.1


def baserunning_runs(sb: int, cs: int, weights: WOBAConstant) -> float:
    return sb * weights.run_sb + cs * weights.run_cs


def fielding_runs(
    putouts: int,
    assists: int,
    games: int,
    league_range_factor: float,
    runs_per_play: float = DEFAULT_FIELDING_RUNS_PER_PLAY,
) -> float:
    """Range-factor fielding runs: plays per game above the league rate."""
    if games == 0:
        return 0.0
    range_factor = (putouts + assists) / games
    return (range_factor - league_range_factor) * games * runs_per_play


def positional_runs(position: str, games: int) -> float:
    adjustment = POSITIONAL_ADJUSTMENTS.get(position.upper())
    if adjustment is None:
        raise InvalidContext(f"Unknown position '{position}'")
    return adjustment * games / 162


def replacement_runs(pa: int, runs_per_pa: float = DEFAULT_REPLACEMENT_RUNS_PER_PA) -> float:
    return pa * runs_per_pa


def position_player_war(
    stats: AdvancedBattingStats,
    constants: SeasonConstants,
    *,
    aggregator: WARAggregator | None = None,
    position: str | None = None,
    games: int = 0,
    fielding: float | None = None,
    default_replacement_runs_per_pa: float = DEFAULT_REPLACEMENT_RUNS_PER_PA,
) -> PlayerWARSummary:
    """WAR for a position player from derived batting stats.

    Batting runs are wRAA. The league constant's replacement rate is used
    when published, else ``default_replacement_runs_per_pa``.
    """
    aggregator = aggregator or WARAggregator()
    rate = default_replacement_runs_per_pa
    if constants.league is not None and constants.league.replacement_runs_per_pa is not None:
        rate = constants.league.replacement_runs_per_pa

    return aggregator.aggregate(
        player_id=stats.player_id,
        context=stats.context,
        runs_per_win=constants.runs_per_win,
        batting_runs=stats.wraa,
        baserunning_runs=baserunning_runs(stats.line.sb, stats.line.cs, constants.woba),
        fielding_runs=fielding,
        positional_runs=positional_runs(position, games) if position is not None else None,
        replacement_runs=replacement_runs(stats.line.pa, rate),
        team_id=stats.team_id,
    )
