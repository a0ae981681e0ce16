"""Per-game and per-plate-appearance feed rows supplied by the data layer.

Feeds are expected in chronological order; the engine never sorts them.
"""

from dataclasses import dataclass
from datetime import date

from sabermetric_engine.domain.batting_stats import BattingLine


@dataclass(frozen=True)
class PlayerGameBatting:
    game_id: str
    game_date: date
    pa: int
    ab: int
    h: int


@dataclass(frozen=True)
class PlayerGamePitching:
    """A pitcher's line for one game.

    When runs were allowed, ``outs_before_first_run`` and
    ``outs_after_last_run`` split the outs recorded around the scoring so a
    scoreless streak can end or start mid-game. Leave them None when the feed
    does not know the split.
    """

    game_id: str
    game_date: date
    outs_recorded: int
    runs_allowed: int
    outs_before_first_run: int | None = None
    outs_after_last_run: int | None = None


@dataclass(frozen=True)
class TeamGameResult:
    game_id: str
    game_date: date
    opponent_id: str
    home: bool
    runs_scored: int
    runs_allowed: int


@dataclass(frozen=True)
class SplitRow:
    """Counting stats for one game (or one plate appearance) with its split keys."""

    game_id: str
    game_date: date
    home: bool
    line: BattingLine
    batter_hand: str | None = None
    pitcher_hand: str | None = None
    batting_order: int | None = None
