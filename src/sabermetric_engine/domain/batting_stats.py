from dataclasses import dataclass, fields

from sabermetric_engine.domain.context import StatContext
from sabermetric_engine.exceptions import InvalidSnapshot


@dataclass(frozen=True)
class BattingLine:
    """Context-free batting counting stats for one player and context."""

    pa: int = 0
    ab: int = 0
    h: int = 0
    doubles: int = 0
    triples: int = 0
    hr: int = 0
    bb: int = 0
    ibb: int = 0
    hbp: int = 0
    sf: int = 0
    sh: int = 0
    so: int = 0
    sb: int = 0
    cs: int = 0
    fb: int | None = None

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None and value < 0:
                raise InvalidSnapshot(f"Batting tally '{f.name}' is negative: {value}")
        if self.ab > self.pa:
            raise InvalidSnapshot(f"AB ({self.ab}) exceeds PA ({self.pa})")
        if self.h > self.ab:
            raise InvalidSnapshot(f"H ({self.h}) exceeds AB ({self.ab})")
        if self.doubles + self.triples + self.hr > self.h:
            raise InvalidSnapshot("Extra-base hits exceed total hits")
        if self.ibb > self.bb:
            raise InvalidSnapshot(f"IBB ({self.ibb}) exceeds BB ({self.bb})")

    @property
    def singles(self) -> int:
        return self.h - self.doubles - self.triples - self.hr

    @property
    def total_bases(self) -> int:
        return self.singles + 2 * self.doubles + 3 * self.triples + 4 * self.hr

    @property
    def unintentional_bb(self) -> int:
        return self.bb - self.ibb

    def __add__(self, other: "BattingLine") -> "BattingLine":
        fb = None if self.fb is None and other.fb is None else (self.fb or 0) + (other.fb or 0)
        return BattingLine(
            pa=self.pa + other.pa,
            ab=self.ab + other.ab,
            h=self.h + other.h,
            doubles=self.doubles + other.doubles,
            triples=self.triples + other.triples,
            hr=self.hr + other.hr,
            bb=self.bb + other.bb,
            ibb=self.ibb + other.ibb,
            hbp=self.hbp + other.hbp,
            sf=self.sf + other.sf,
            sh=self.sh + other.sh,
            so=self.so + other.so,
            sb=self.sb + other.sb,
            cs=self.cs + other.cs,
            fb=fb,
        )


@dataclass(frozen=True)
class AdvancedBattingStats:
    """Derived hitting metrics for a player in one context.

    Built once from a counting line plus season constants; a different context
    yields a new record rather than an update to this one.
    """

    player_id: str
    context: StatContext
    line: BattingLine
    avg: float
    obp: float
    slg: float
    ops: float
    iso: float
    babip: float
    k_rate: float
    bb_rate: float
    woba: float
    wraa: float
    wrc: float
    wrc_plus: float | None = None
    hr_fb: float | None = None
    team_id: str | None = None
