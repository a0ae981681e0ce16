from dataclasses import dataclass, field
from enum import StrEnum


class SplitDimension(StrEnum):
    HOME_AWAY = "home_away"
    BATTER_HANDED = "batter_handed"
    PITCHER_HANDED = "pitcher_handed"
    MONTH = "month"
    BATTING_ORDER = "batting_order"


class SplitEntityType(StrEnum):
    PLAYER = "player"
    TEAM = "team"


@dataclass(frozen=True)
class SplitGroup:
    key: str
    label: str
    games: int
    pa: int
    ab: int
    h: int
    hr: int
    bb: int
    so: int
    avg: float
    obp: float
    slg: float
    ops: float
    woba: float | None = None
    meta: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SplitResult:
    entity_type: SplitEntityType
    entity_id: str
    season: int
    dimension: SplitDimension
    groups: tuple[SplitGroup, ...]

    def group(self, key: str) -> SplitGroup | None:
        return next((g for g in self.groups if g.key == key), None)
