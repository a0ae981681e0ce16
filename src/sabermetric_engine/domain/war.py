from dataclasses import dataclass
from enum import StrEnum

from sabermetric_engine.domain.context import StatContext


class WARComponent(StrEnum):
    BATTING = "batting"
    BASERUNNING = "baserunning"
    FIELDING = "fielding"
    POSITIONAL = "positional"
    LEAGUE_ADJUSTMENT = "league_adjustment"
    REPLACEMENT = "replacement"


@dataclass(frozen=True)
class PlayerWARSummary:
    """WAR and the component run values it was computed from.

    A component that was not supplied is None here and absent from
    ``components_present``; it contributes zero runs to ``war``.
    """

    player_id: str
    context: StatContext
    war: float
    runs_per_win: float
    components_present: frozenset[WARComponent]
    batting_runs: float | None = None
    baserunning_runs: float | None = None
    fielding_runs: float | None = None
    positional_runs: float | None = None
    league_adjustment: float | None = None
    replacement_runs: float | None = None
    pitching_rar: float | None = None
    team_id: str | None = None

    @property
    def runs_above_replacement(self) -> float:
        return self.war * self.runs_per_win
