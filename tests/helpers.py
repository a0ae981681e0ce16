"""Builders shared across test modules."""

import math
from itertools import product

from sabermetric_engine.domain.game_state import StateBucket, WinExpectancy, WinExpectancyEra, WinExpectancyTable
from sabermetric_engine.domain.plays import PlayEvent

MODERN_ERA = WinExpectancyEra(start_year=2011, end_year=2025, label="Modern Era")

_RUNNER_CODES = ("___", "1__", "_2_", "__3", "12_", "1_3", "_23", "123")


def _synthetic_probability(inning: int, top: bool, outs: int, runners_code: str, diff: int) -> float:
    """Logistic home-win curve: tighter late in games, shifted by base-out run potential."""
    half_innings_left = max(1.0, 2 * (9 - min(inning, 9)) + (2.0 if top else 1.0))
    runners = sum(1 for c in runners_code if c != "_")
    potential = (0.5 + 0.35 * runners) * (3 - outs) / 3
    effective = diff - potential if top else diff + potential
    slope = 1.2 / math.sqrt(half_innings_left)
    p = 1 / (1 + math.exp(-slope * (effective + 0.1)))
    return min(0.995, max(0.005, p))


def make_synthetic_table(era: WinExpectancyEra = MODERN_ERA, cap: int = 11) -> WinExpectancyTable:
    entries: dict[StateBucket, WinExpectancy] = {}
    for inning, top, outs, code, diff in product(
        range(1, 11), (True, False), range(3), _RUNNER_CODES, range(-cap, cap + 1)
    ):
        bucket = StateBucket(inning=inning, top_of_inning=top, outs=outs, runners_code=code, score_diff=diff)
        entries[bucket] = WinExpectancy(
            bucket=bucket,
            home_win_probability=_synthetic_probability(inning, top, outs, code, diff),
            era=era,
            sample_size=100,
        )
    return WinExpectancyTable(era=era, entries=entries)


def make_event(
    event_index: int,
    inning: int,
    top: bool,
    outs: int,
    bases: tuple[bool, bool, bool] = (False, False, False),
    home: int = 0,
    away: int = 0,
    *,
    game_id: str = "NYA202404010",
    batter_id: str | None = "batter1",
    pitcher_id: str | None = "pitcher1",
) -> PlayEvent:
    return PlayEvent(
        game_id=game_id,
        event_index=event_index,
        inning=inning,
        top_of_inning=top,
        outs_after=outs,
        bases_after=bases,
        home_score_after=home,
        away_score_after=away,
        batter_id=batter_id,
        pitcher_id=pitcher_id,
    )
