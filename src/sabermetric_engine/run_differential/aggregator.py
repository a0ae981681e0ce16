import logging
from collections.abc import Iterable, Sequence
from itertools import accumulate

import numpy as np

from sabermetric_engine.domain.game_logs import TeamGameResult
from sabermetric_engine.domain.run_differential import (
    RunDifferentialGamePoint,
    RunDifferentialSeries,
    RunDifferentialWindow,
    RunDifferentialWindowPoint,
)
from sabermetric_engine.exceptions import InvalidContext

logger = logging.getLogger(__name__)

DEFAULT_WINDOWS: tuple[int, ...] = (10, 20, 30)


def _trailing_sums(values: np.ndarray, size: int) -> np.ndarray:
    """Sums over every full trailing window of ``size`` values."""
    cumulative = np.concatenate(([0], np.cumsum(values)))
    return cumulative[size:] - cumulative[:-size]


class RunDifferentialAggregator:
    def series(
        self,
        team_id: str,
        season: int,
        games: Iterable[TeamGameResult],
        windows: Sequence[int] = DEFAULT_WINDOWS,
    ) -> RunDifferentialSeries:
        """Per-game and cumulative run differential plus trailing-window sums.

        A window of N yields one point per game from the Nth onward; a season
        shorter than N yields an empty window rather than partial sums.
        """
        for size in windows:
            if size < 1:
                raise InvalidContext(f"Window size must be at least 1, got {size}")

        feed = list(games)
        differentials = [g.runs_scored - g.runs_allowed for g in feed]
        points = tuple(
            RunDifferentialGamePoint(
                game_id=g.game_id,
                game_date=g.game_date,
                opponent_id=g.opponent_id,
                home=g.home,
                runs_scored=g.runs_scored,
                runs_allowed=g.runs_allowed,
                differential=diff,
                cumulative_diff=cumulative,
            )
            for g, diff, cumulative in zip(feed, differentials, accumulate(differentials), strict=True)
        )

        scored = np.array([g.runs_scored for g in feed], dtype=np.int64)
        allowed = np.array([g.runs_allowed for g in feed], dtype=np.int64)
        rolling = tuple(self._window(feed, scored, allowed, size) for size in windows)

        total_scored = int(scored.sum())
        total_allowed = int(allowed.sum())
        logger.debug("Run differential for %s in %d: %d games", team_id, season, len(feed))
        return RunDifferentialSeries(
            entity_type="team",
            entity_id=team_id,
            season=season,
            games_played=len(feed),
            runs_scored=total_scored,
            runs_allowed=total_allowed,
            run_differential=total_scored - total_allowed,
            games=points,
            rolling=rolling,
        )

    @staticmethod
    def _window(
        feed: list[TeamGameResult],
        scored: np.ndarray,
        allowed: np.ndarray,
        size: int,
    ) -> RunDifferentialWindow:
        if len(feed) < size:
            return RunDifferentialWindow(window_size=size, label=f"last_{size}", points=())
        scored_sums = _trailing_sums(scored, size)
        allowed_sums = _trailing_sums(allowed, size)
        points = tuple(
            RunDifferentialWindowPoint(
                end_game_id=feed[end].game_id,
                end_date=feed[end].game_date,
                games_in_window=size,
                runs_scored=int(rs),
                runs_allowed=int(ra),
                run_differential=int(rs - ra),
            )
            for end, rs, ra in zip(range(size - 1, len(feed)), scored_sums, allowed_sums, strict=True)
        )
        return RunDifferentialWindow(window_size=size, label=f"last_{size}", points=points)
