import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from sabermetric_engine.domain.game_state import (
    GameState,
    WinExpectancy,
    WinExpectancyEra,
    WinExpectancyTable,
)
from sabermetric_engine.exceptions import StateNotFound

logger = logging.getLogger(__name__)

DEFAULT_SCORE_DIFF_CAP = 11
DEFAULT_EXTRA_INNINGS_BUCKET = 10


class WinExpectancyModel:
    """State -> home-win probability lookup over era-bounded tables.

    Tables are kept as a list sorted by era span (narrowest first), so the
    first era that contains a query wins. Tables are read-only once the model
    is built and can be shared between workers.
    """

    def __init__(
        self,
        tables: Iterable[WinExpectancyTable],
        *,
        score_diff_cap: int = DEFAULT_SCORE_DIFF_CAP,
        extra_innings_bucket: int = DEFAULT_EXTRA_INNINGS_BUCKET,
    ) -> None:
        self._tables = sorted(tables, key=lambda t: (t.era.span, -t.era.start_year))
        self._score_diff_cap = score_diff_cap
        self._extra_innings_bucket = extra_innings_bucket

    @property
    def score_diff_cap(self) -> int:
        return self._score_diff_cap

    def eras(self) -> list[WinExpectancyEra]:
        return sorted((t.era for t in self._tables), key=lambda e: (e.start_year, e.end_year))

    def get(self, state: GameState) -> WinExpectancy:
        """Look up a state; ``state.year`` selects the era, else the latest era is used."""
        if state.year is None:
            table, approximate = self._latest_table(), False
        else:
            table, approximate = self._resolve(state.year, state.year)
        return self._lookup(table, state, approximate)

    def get_for_era(self, state: GameState, start_year: int, end_year: int) -> WinExpectancy:
        table, approximate = self._resolve(start_year, end_year)
        return self._lookup(table, state, approximate)

    def batch_get(self, states: Sequence[GameState]) -> list[WinExpectancy]:
        """Order-preserving equivalent of calling ``get`` for each state."""
        resolved: dict[int | None, tuple[WinExpectancyTable, bool]] = {}
        results: list[WinExpectancy] = []
        for state in states:
            if state.year not in resolved:
                if state.year is None:
                    resolved[None] = (self._latest_table(), False)
                else:
                    resolved[state.year] = self._resolve(state.year, state.year)
            table, approximate = resolved[state.year]
            results.append(self._lookup(table, state, approximate))
        return results

    def _lookup(self, table: WinExpectancyTable, state: GameState, approximate: bool) -> WinExpectancy:
        bucket = state.bucket(self._score_diff_cap, self._extra_innings_bucket)
        we = table.entries.get(bucket)
        if we is None:
            raise StateNotFound(
                f"No win expectancy for inning={bucket.inning} top={bucket.top_of_inning} "
                f"outs={bucket.outs} runners={bucket.runners_code} diff={bucket.score_diff} "
                f"in era {table.era.start_year}-{table.era.end_year}",
                runners_code=bucket.runners_code,
            )
        if approximate and not we.approximate:
            return replace(we, approximate=True)
        return we

    def _latest_table(self) -> WinExpectancyTable:
        if not self._tables:
            raise StateNotFound("No win expectancy tables loaded")
        return max(self._tables, key=lambda t: (t.era.end_year, -t.era.span))

    def _resolve(self, start_year: int, end_year: int) -> tuple[WinExpectancyTable, bool]:
        """Pick the table for a year range.

        Order of preference: the narrowest era covering the whole range, the
        latest-ending era inside the range, the latest-ending era overlapping
        it, then the nearest earlier era. The last two are approximate.
        """
        for table in self._tables:
            if table.era.covers(start_year, end_year):
                return table, False

        inside = [t for t in self._tables if start_year <= t.era.start_year and t.era.end_year <= end_year]
        if inside:
            return max(inside, key=lambda t: (t.era.end_year, -t.era.span)), False

        overlapping = [t for t in self._tables if t.era.start_year <= end_year and t.era.end_year >= start_year]
        if overlapping:
            nearest = max(overlapping, key=lambda t: (t.era.end_year, -t.era.span))
            logger.warning(
                "No era contains %d-%d; using overlapping era %d-%d",
                start_year,
                end_year,
                nearest.era.start_year,
                nearest.era.end_year,
            )
            return nearest, True

        earlier = [t for t in self._tables if t.era.end_year < start_year]
        if not earlier:
            raise StateNotFound(f"No win expectancy era contains or precedes {start_year}-{end_year}")
        nearest = max(earlier, key=lambda t: (t.era.end_year, -t.era.span))
        logger.warning(
            "No era contains %d-%d; using nearest earlier era %d-%d",
            start_year,
            end_year,
            nearest.era.start_year,
            nearest.era.end_year,
        )
        return nearest, True
