from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class StreakKind(StrEnum):
    HITTING = "hitting"
    SCORELESS_INNINGS = "scoreless_innings"


class StreakEntityType(StrEnum):
    PLAYER = "player"
    TEAM = "team"


def format_innings(outs: int) -> str:
    """Render outs in baseball innings notation, e.g. 23 outs -> "7.2"."""
    return f"{outs // 3}.{outs % 3}"


@dataclass(frozen=True)
class StreakPoint:
    game_id: str
    game_date: date
    index: int
    plate_appearances: int = 0
    at_bats: int = 0
    hits: int = 0
    outs: int = 0
    runs_allowed: int = 0


@dataclass(frozen=True)
class Streak:
    """A maximal run of games (hitting) or outs (scoreless innings).

    ``length`` counts games for hitting streaks and outs for scoreless-innings
    streaks.
    """

    id: str
    kind: StreakKind
    entity_type: StreakEntityType
    entity_id: str
    label: str
    season: int
    length: int
    start_game_id: str
    end_game_id: str
    start_date: date
    end_date: date
    timeline: tuple[StreakPoint, ...] = ()

    @property
    def innings(self) -> str | None:
        if self.kind is not StreakKind.SCORELESS_INNINGS:
            return None
        return format_innings(self.length)
