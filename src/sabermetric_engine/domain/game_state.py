from dataclasses import dataclass, field


@dataclass(frozen=True)
class StateBucket:
    """Capped lookup key into a win-expectancy table."""

    inning: int
    top_of_inning: bool
    outs: int
    runners_code: str
    score_diff: int


@dataclass(frozen=True)
class GameState:
    """A game situation from the home team's perspective.

    ``score_diff`` is home runs minus away runs. ``year`` optionally selects
    the era used for win-expectancy lookups.
    """

    inning: int
    top_of_inning: bool
    outs: int = 0
    on_first: bool = False
    on_second: bool = False
    on_third: bool = False
    score_diff: int = 0
    year: int | None = None

    @property
    def runners_code(self) -> str:
        return "".join(
            (
                "1" if self.on_first else "_",
                "2" if self.on_second else "_",
                "3" if self.on_third else "_",
            )
        )

    @property
    def runners_on(self) -> int:
        return int(self.on_first) + int(self.on_second) + int(self.on_third)

    def bucket(self, score_diff_cap: int, extra_innings_bucket: int) -> StateBucket:
        """Collapse the state into its table bucket.

        Score differentials beyond the cap fold into the boundary bucket and
        every inning after the ninth folds into ``extra_innings_bucket``.
        """
        diff = max(-score_diff_cap, min(score_diff_cap, self.score_diff))
        inning = extra_innings_bucket if self.inning > 9 else self.inning
        return StateBucket(
            inning=inning,
            top_of_inning=self.top_of_inning,
            outs=self.outs,
            runners_code=self.runners_code,
            score_diff=diff,
        )


@dataclass(frozen=True)
class WinExpectancyEra:
    start_year: int
    end_year: int
    label: str = ""

    def contains(self, year: int) -> bool:
        return self.start_year <= year <= self.end_year

    def covers(self, start_year: int, end_year: int) -> bool:
        return self.start_year <= start_year and end_year <= self.end_year

    @property
    def span(self) -> int:
        return self.end_year - self.start_year


@dataclass(frozen=True)
class WinExpectancy:
    """Home-win probability for one bucket within one era.

    ``approximate`` is True when no era contained the requested years and the
    nearest earlier era was used instead.
    """

    bucket: StateBucket
    home_win_probability: float
    era: WinExpectancyEra
    sample_size: int = 0
    approximate: bool = False


@dataclass(frozen=True)
class WinExpectancyTable:
    era: WinExpectancyEra
    entries: dict[StateBucket, WinExpectancy] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)
