from dataclasses import dataclass


@dataclass(frozen=True)
class WOBAConstant:
    """Season-specific linear weights and run environment."""

    season: int
    w_bb: float
    w_hbp: float
    w_1b: float
    w_2b: float
    w_3b: float
    w_hr: float
    woba_scale: float
    woba: float
    run_sb: float
    run_cs: float
    r_pa: float
    r_w: float
    c_fip: float
    lg_hr_per_fb: float | None = None


@dataclass(frozen=True)
class LeagueConstant:
    """League-level averages for one season; every baseline is optional."""

    season: int
    league: str
    woba_avg: float | None = None
    wrc_per_pa: float | None = None
    runs_per_win: float | None = None
    replacement_runs_per_pa: float | None = None
    era: float | None = None
    ra9: float | None = None
    total_pa: int | None = None
    total_runs: int | None = None


@dataclass(frozen=True)
class SeasonConstants:
    """Result of a constants lookup.

    ``fallback_from`` is set when the caller asked for a nearest-prior fallback
    and the lookup had to use an earlier season than the one requested.
    """

    woba: WOBAConstant
    league: LeagueConstant | None = None
    fallback_from: int | None = None

    @property
    def season(self) -> int:
        return self.woba.season

    @property
    def league_woba(self) -> float:
        """League wOBA baseline for wRAA; the league's own average when published."""
        if self.league is not None and self.league.woba_avg is not None:
            return self.league.woba_avg
        return self.woba.woba

    @property
    def runs_per_pa(self) -> float:
        if self.league is not None:
            if self.league.wrc_per_pa is not None:
                return self.league.wrc_per_pa
            if self.league.total_runs is not None and self.league.total_pa:
                return self.league.total_runs / self.league.total_pa
        return self.woba.r_pa

    @property
    def runs_per_win(self) -> float:
        if self.league is not None and self.league.runs_per_win is not None:
            return self.league.runs_per_win
        return self.woba.r_w
