from dataclasses import dataclass

from sabermetric_engine.domain.game_state import WinExpectancyEra


@dataclass(frozen=True)
class Era:
    name: str
    short_name: str
    start_year: int
    end_year: int
    notes: str = ""

    def to_win_expectancy_era(self) -> WinExpectancyEra:
        return WinExpectancyEra(start_year=self.start_year, end_year=self.end_year, label=self.name)


ERAS: tuple[Era, ...] = (
    Era("Federal League Era", "fed", 1914, 1915, "Federal League games (third major league)"),
    Era("Negro Leagues Era", "nlg", 1935, 1949, "Negro Leagues games available in Retrosheet"),
    Era("1970s", "1970s", 1970, 1979, "Expansion era and free agency begins"),
    Era("1980s", "1980s", 1980, 1989, "Rise of power hitting and offensive explosion"),
    Era("Steroid Era", "steroid", 1990, 2010, "Enhanced performance and home run records"),
    Era("Modern Era", "modern", 2011, 2025, "Analytics-driven baseball and pitch clock"),
)


def eras_for_year(year: int) -> list[Era]:
    return [era for era in ERAS if era.start_year <= year <= era.end_year]
