from dataclasses import dataclass, fields

from sabermetric_engine.domain.context import StatContext
from sabermetric_engine.exceptions import InvalidSnapshot


@dataclass(frozen=True)
class PitchingLine:
    """Context-free pitching counting stats; innings are tracked as outs."""

    ip_outs: int = 0
    bf: int = 0
    h: int = 0
    r: int = 0
    er: int = 0
    hr: int = 0
    bb: int = 0
    ibb: int = 0
    hbp: int = 0
    so: int = 0
    fb: int | None = None

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None and value < 0:
                raise InvalidSnapshot(f"Pitching tally '{f.name}' is negative: {value}")
        if self.er > self.r:
            raise InvalidSnapshot(f"ER ({self.er}) exceeds R ({self.r})")
        if self.hr > self.h:
            raise InvalidSnapshot(f"HR ({self.hr}) exceeds H ({self.h})")

    @property
    def innings_pitched(self) -> float:
        return self.ip_outs / 3


@dataclass(frozen=True)
class AdvancedPitchingStats:
    """Derived pitching metrics for a player in one context.

    ``era_plus`` is higher-is-better; ``fip_minus`` and ``xfip_minus`` are
    lower-is-better. Index fields are None when their denominator is zero or
    the league baseline is unknown.
    """

    player_id: str
    context: StatContext
    line: PitchingLine
    era: float
    whip: float
    k_per_9: float
    bb_per_9: float
    hr_per_9: float
    ra9: float
    fip: float
    xfip: float | None = None
    era_plus: float | None = None
    fip_minus: float | None = None
    xfip_minus: float | None = None
    team_id: str | None = None
