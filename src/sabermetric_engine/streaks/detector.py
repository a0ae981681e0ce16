import logging
from collections.abc import Iterable, Sequence

from sabermetric_engine.domain.game_logs import PlayerGameBatting, PlayerGamePitching
from sabermetric_engine.domain.streak import (
    Streak,
    StreakEntityType,
    StreakKind,
    StreakPoint,
    format_innings,
)
from sabermetric_engine.exceptions import InvalidContext

logger = logging.getLogger(__name__)


def _rank(streak: Streak) -> tuple[int, int, int]:
    # Longest first, then most recent.
    return (-streak.length, -streak.end_date.toordinal(), -streak.timeline[-1].index)


def longest(streaks: Iterable[Streak]) -> Streak | None:
    return min(streaks, key=_rank, default=None)


def _make_streak(
    kind: StreakKind,
    entity_id: str,
    season: int,
    length: int,
    timeline: Sequence[StreakPoint],
    label: str,
) -> Streak:
    first, last = timeline[0], timeline[-1]
    return Streak(
        id=f"{entity_id}-{kind}-{first.game_date.isoformat()}-{last.game_date.isoformat()}",
        kind=kind,
        entity_type=StreakEntityType.PLAYER,
        entity_id=entity_id,
        label=label,
        season=season,
        length=length,
        start_game_id=first.game_id,
        end_game_id=last.game_id,
        start_date=first.game_date,
        end_date=last.game_date,
        timeline=tuple(timeline),
    )


class StreakDetector:
    """Scans a player's chronological game feed for streaks.

    Every streak reaching the minimum is returned, longest first and, among
    equal lengths, most recent first.
    """

    def hitting_streaks(
        self,
        player_id: str,
        season: int,
        games: Iterable[PlayerGameBatting],
        min_length: int = 1,
    ) -> list[Streak]:
        """Consecutive games with at least one hit.

        Games without an at-bat neither extend nor break a streak.
        """
        if min_length < 1:
            raise InvalidContext(f"Minimum streak length must be at least 1, got {min_length}")

        streaks: list[Streak] = []
        current: list[StreakPoint] = []

        def close() -> None:
            if len(current) >= min_length:
                streaks.append(
                    _make_streak(
                        StreakKind.HITTING,
                        player_id,
                        season,
                        len(current),
                        current,
                        f"{len(current)}-game hitting streak",
                    )
                )
            current.clear()

        for index, game in enumerate(games):
            if game.ab == 0:
                continue
            if game.h > 0:
                current.append(
                    StreakPoint(
                        game_id=game.game_id,
                        game_date=game.game_date,
                        index=index,
                        plate_appearances=game.pa,
                        at_bats=game.ab,
                        hits=game.h,
                    )
                )
            else:
                close()
        close()

        logger.debug("Found %d hitting streaks for %s in %d", len(streaks), player_id, season)
        return sorted(streaks, key=_rank)

    def scoreless_innings_streaks(
        self,
        player_id: str,
        season: int,
        games: Iterable[PlayerGamePitching],
        min_innings: float = 0.0,
    ) -> list[Streak]:
        """Consecutive scoreless outs, measured in thirds of an inning.

        A game in which runs scored ends the running streak, adding the outs
        recorded before the first run when the feed supplies them, and starts
        a new streak with the outs recorded after the last run.
        """
        if min_innings < 0:
            raise InvalidContext(f"Minimum innings must be non-negative, got {min_innings}")
        min_outs = max(1, round(min_innings * 3))

        streaks: list[Streak] = []
        current: list[StreakPoint] = []

        def close() -> None:
            outs = sum(p.outs for p in current)
            if current and outs >= min_outs:
                streaks.append(
                    _make_streak(
                        StreakKind.SCORELESS_INNINGS,
                        player_id,
                        season,
                        outs,
                        current,
                        f"{format_innings(outs)} scoreless innings",
                    )
                )
            current.clear()

        for index, game in enumerate(games):
            if game.runs_allowed == 0:
                if game.outs_recorded > 0:
                    current.append(StreakPoint(game.game_id, game.game_date, index, outs=game.outs_recorded))
                continue

            if game.outs_before_first_run:
                current.append(StreakPoint(game.game_id, game.game_date, index, outs=game.outs_before_first_run))
            close()
            if game.outs_after_last_run:
                current.append(StreakPoint(game.game_id, game.game_date, index, outs=game.outs_after_last_run))
        close()

        logger.debug("Found %d scoreless streaks for %s in %d", len(streaks), player_id, season)
        return sorted(streaks, key=_rank)
