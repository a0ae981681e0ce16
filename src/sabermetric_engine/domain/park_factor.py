from dataclasses import dataclass


@dataclass(frozen=True)
class ParkSeasonAggregate:
    """Run-environment totals for all games played at one park in one season.

    Totals count both teams; they are supplied by the ingestion layer.
    """

    park_id: str
    season: int
    games: int
    runs: int
    hr: int
    bb: int
    h: int


@dataclass(frozen=True)
class ParkFactor:
    """Park factors on the 100 = neutral scale.

    The component factors (runs, HR, BB, H) are raw for single-season records
    and games-weighted blends for multi-year records. The ``basic_*`` values are
    regressed runs factors over 1/3/5-season windows.
    """

    park_id: str
    season: int
    runs_factor: float
    hr_factor: float
    bb_factor: float
    h_factor: float
    games_sampled: int
    basic_1yr: float | None = None
    basic_3yr: float | None = None
    basic_5yr: float | None = None
    provider: str = "internal"
    multi_year: bool = False

    @property
    def preferred_runs_factor(self) -> float:
        """Most stable runs factor available, as used for wRC+ and ERA+."""
        if self.basic_5yr is not None:
            return self.basic_5yr
        return self.runs_factor
