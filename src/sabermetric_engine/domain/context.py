from dataclasses import dataclass
from enum import StrEnum


class StatProvider(StrEnum):
    """Whose formulas and constants a derived record follows."""

    UNKNOWN = "unknown"
    FANGRAPHS = "fangraphs"
    BBREF = "baseball_reference"
    INTERNAL = "internal"


@dataclass(frozen=True)
class StatContext:
    """Anchors a derived stat line to its season/league/park environment.

    Attributes:
        season: Season year, or 0 for multi-year and career lines.
        provider: Formula/constants provider the line follows.
        league: League identifier ("AL", "NL", ...), None for cross-league lines.
        park_neutral: True when the input counts are already park-adjusted.
        regular_season: False for postseason or mixed lines.
    """

    season: int
    provider: StatProvider = StatProvider.INTERNAL
    league: str | None = None
    park_neutral: bool = False
    regular_season: bool = True

    @property
    def is_multi_year(self) -> bool:
        return self.season == 0
