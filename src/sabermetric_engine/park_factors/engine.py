import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from sabermetric_engine.domain.park_factor import ParkFactor, ParkSeasonAggregate
from sabermetric_engine.exceptions import InsufficientSample, InvalidContext

logger = logging.getLogger(__name__)

NEUTRAL = 100.0
_COMPONENTS = ("runs", "hr", "bb", "h")


@dataclass(frozen=True)
class _SeasonFactors:
    season: int
    games: int
    runs: float
    hr: float
    bb: float
    h: float


def regress(factor: float, games: float, regression_games: float) -> float:
    """Shrink a factor toward neutral; fewer games sampled regress harder."""
    if games <= 0:
        return NEUTRAL
    return NEUTRAL + (factor - NEUTRAL) * games / (games + regression_games)


class ParkFactorEngine:
    """Computes park factors from per-park, per-season run-environment totals.

    A single-season factor compares the park's per-game rate with the per-game
    rate of every other park in the same season. Multi-season factors blend
    single seasons by games sampled and then regress toward 100.
    """

    def __init__(
        self,
        aggregates: Iterable[ParkSeasonAggregate],
        *,
        regression_games: float = 162.0,
        min_games: int = 1,
    ) -> None:
        self._by_season: dict[int, dict[str, ParkSeasonAggregate]] = {}
        for agg in aggregates:
            self._by_season.setdefault(agg.season, {})[agg.park_id] = agg
        self._regression_games = regression_games
        self._min_games = max(1, min_games)

    def compute(self, park_id: str, season: int) -> ParkFactor:
        raw = self._season_factors(park_id, season)
        return ParkFactor(
            park_id=park_id,
            season=season,
            runs_factor=raw.runs,
            hr_factor=raw.hr,
            bb_factor=raw.bb,
            h_factor=raw.h,
            games_sampled=raw.games,
            basic_1yr=regress(raw.runs, raw.games, self._regression_games),
            basic_3yr=self._regressed_runs_window(park_id, season - 2, season),
            basic_5yr=self._regressed_runs_window(park_id, season - 4, season),
        )

    def compute_multi_year(self, park_id: str, from_season: int, to_season: int) -> ParkFactor:
        if from_season > to_season:
            raise InvalidContext(f"Season range {from_season}-{to_season} is reversed")
        seasons = self._usable_seasons(park_id, from_season, to_season)
        if not seasons:
            raise InsufficientSample(f"No games sampled at park {park_id} between {from_season} and {to_season}")

        games = np.array([s.games for s in seasons], dtype=float)
        total_games = int(games.sum())
        blended = {
            name: regress(
                float(np.average([getattr(s, name) for s in seasons], weights=games)),
                total_games,
                self._regression_games,
            )
            for name in _COMPONENTS
        }
        latest = seasons[-1]
        logger.debug(
            "Park %s %d-%d: %d seasons, %d games, runs factor %.1f",
            park_id,
            from_season,
            to_season,
            len(seasons),
            total_games,
            blended["runs"],
        )
        return ParkFactor(
            park_id=park_id,
            season=to_season,
            runs_factor=blended["runs"],
            hr_factor=blended["hr"],
            bb_factor=blended["bb"],
            h_factor=blended["h"],
            games_sampled=total_games,
            basic_1yr=regress(latest.runs, latest.games, self._regression_games) if latest.season == to_season else None,
            multi_year=True,
        )

    def season_factors(self, season: int) -> list[ParkFactor]:
        """Single-season factors for every park with a usable sample."""
        factors: list[ParkFactor] = []
        for park_id in sorted(self._by_season.get(season, {})):
            try:
                factors.append(self.compute(park_id, season))
            except InsufficientSample:
                logger.debug("Skipping park %s in %d: insufficient sample", park_id, season)
        return factors

    def _season_factors(self, park_id: str, season: int) -> _SeasonFactors:
        parks = self._by_season.get(season, {})
        park = parks.get(park_id)
        games = park.games if park is not None else 0
        if park is None or games < self._min_games:
            raise InsufficientSample(
                f"Park {park_id} has {games} games sampled in {season} (minimum {self._min_games})",
                games_sampled=games,
            )

        others = [p for pid, p in parks.items() if pid != park_id and p.games > 0]
        other_games = sum(p.games for p in others)
        if other_games == 0:
            raise InsufficientSample(
                f"No league games outside park {park_id} in {season}",
                games_sampled=games,
            )

        def factor(name: str) -> float:
            league_rate = sum(getattr(p, name) for p in others) / other_games
            if league_rate == 0:
                return NEUTRAL
            return NEUTRAL * (getattr(park, name) / games) / league_rate

        return _SeasonFactors(
            season=season,
            games=games,
            runs=factor("runs"),
            hr=factor("hr"),
            bb=factor("bb"),
            h=factor("h"),
        )

    def _usable_seasons(self, park_id: str, from_season: int, to_season: int) -> list[_SeasonFactors]:
        seasons: list[_SeasonFactors] = []
        for season in range(from_season, to_season + 1):
            try:
                seasons.append(self._season_factors(park_id, season))
            except InsufficientSample:
                continue
        return seasons

    def _regressed_runs_window(self, park_id: str, from_season: int, to_season: int) -> float | None:
        seasons = self._usable_seasons(park_id, from_season, to_season)
        if not seasons:
            return None
        games = np.array([s.games for s in seasons], dtype=float)
        blend = float(np.average([s.runs for s in seasons], weights=games))
        return regress(blend, float(games.sum()), self._regression_games)
