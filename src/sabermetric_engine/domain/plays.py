from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class PlayEvent:
    """One play-by-play event as reported by the event feed.

    Outs, base occupancy and score describe the situation after the play.
    Bases are given as (first, second, third) occupancy.
    """

    game_id: str
    event_index: int
    inning: int
    top_of_inning: bool
    outs_after: int
    bases_after: tuple[bool, bool, bool]
    home_score_after: int
    away_score_after: int
    batter_id: str | None = None
    pitcher_id: str | None = None
    description: str = ""


@dataclass(frozen=True)
class LeverageReference:
    """Mean win-expectancy swing across a season's state distribution."""

    season: int
    mean_swing: float


@dataclass(frozen=True)
class WinProbabilityPoint:
    """State and win probabilities after a single event."""

    event_index: int
    inning: int
    top_of_inning: bool
    home_score: int
    away_score: int
    outs: int
    bases: str
    home_win_prob: float
    away_win_prob: float
    description: str = ""


@dataclass(frozen=True)
class WinProbabilityCurve:
    game_id: str
    season: int
    points: tuple[WinProbabilityPoint, ...]
    home_win_prob_start: float = 0.5


@dataclass(frozen=True)
class PlateAppearanceLeverage:
    """Leverage and win-expectancy data for a single plate appearance.

    The ``*_before`` fields describe the situation the batter came up in.
    ``we_change`` is signed and from the home team's perspective.
    """

    game_id: str
    event_index: int
    inning: int
    top_of_inning: bool
    home_score_before: int
    away_score_before: int
    outs_before: int
    bases_before: str
    we_before: float
    we_after: float
    leverage_index: float
    we_change: float
    batter_id: str | None = None
    pitcher_id: str | None = None
    description: str = ""


class LeverageRole(StrEnum):
    BATTER = "batter"
    PITCHER = "pitcher"


@dataclass(frozen=True)
class GameWinProbabilitySummary:
    game_id: str
    season: int
    home_win_prob_start: float
    home_win_prob_end: float
    biggest_positive_swing: PlateAppearanceLeverage | None = None
    biggest_negative_swing: PlateAppearanceLeverage | None = None


@dataclass(frozen=True)
class PlayerLeverageSummary:
    player_id: str
    role: LeverageRole
    plate_appearances: int
    avg_leverage_index: float
    low_leverage_pa: int
    medium_leverage_pa: int
    high_leverage_pa: int
    win_probability_added: float
