import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sabermetric_engine.domain.game_state import GameState
from sabermetric_engine.domain.plays import (
    LeverageReference,
    PlateAppearanceLeverage,
    PlayEvent,
    WinProbabilityCurve,
    WinProbabilityPoint,
)
from sabermetric_engine.exceptions import InvalidContext, MalformedEventSequence
from sabermetric_engine.leverage.index import LeverageIndexCalculator, settle
from sabermetric_engine.win_expectancy.model import WinExpectancyModel

logger = logging.getLogger(__name__)


def _bases_code(bases: tuple[bool, bool, bool]) -> str:
    return "".join(str(i + 1) if occupied else "_" for i, occupied in enumerate(bases))


@dataclass(frozen=True)
class _Step:
    event: PlayEvent
    before: GameState
    home_before: int
    away_before: int
    after: GameState | float


class LeverageCurveBuilder:
    """Folds a game's ordered play events into win-probability and leverage output.

    The fold starts at the top of the first with no outs, bases empty and a
    tied score. Each event must continue the state the previous event left;
    any impossible transition aborts the whole game.
    """

    def __init__(
        self,
        model: WinExpectancyModel,
        reference: LeverageReference | None = None,
    ) -> None:
        self._model = model
        self._calculator = LeverageIndexCalculator(model, reference) if reference is not None else None

    def build_curve(self, events: Sequence[PlayEvent], *, season: int | None = None) -> WinProbabilityCurve:
        steps = self._walk(events, season)
        opening = GameState(inning=1, top_of_inning=True, year=season)
        we_before, we_after = self._lookup(steps)

        points = tuple(
            WinProbabilityPoint(
                event_index=step.event.event_index,
                inning=step.event.inning,
                top_of_inning=step.event.top_of_inning,
                home_score=step.event.home_score_after,
                away_score=step.event.away_score_after,
                outs=step.event.outs_after,
                bases=_bases_code(step.event.bases_after),
                home_win_prob=after,
                away_win_prob=1.0 - after,
                description=step.event.description,
            )
            for step, after in zip(steps, we_after, strict=True)
        )
        game_id = events[0].game_id if events else ""
        logger.debug("Built win probability curve for %s with %d points", game_id, len(points))
        return WinProbabilityCurve(
            game_id=game_id,
            season=season or 0,
            points=points,
            home_win_prob_start=we_before[0] if steps else self._model.get(opening).home_win_probability,
        )

    def build_leverages(
        self, events: Sequence[PlayEvent], *, season: int | None = None
    ) -> list[PlateAppearanceLeverage]:
        if self._calculator is None:
            raise InvalidContext("Leverage index requires a leverage reference")
        steps = self._walk(events, season)
        we_before, we_after = self._lookup(steps)

        leverages = []
        for step, before, after in zip(steps, we_before, we_after, strict=True):
            leverages.append(
                PlateAppearanceLeverage(
                    game_id=step.event.game_id,
                    event_index=step.event.event_index,
                    inning=step.event.inning,
                    top_of_inning=step.event.top_of_inning,
                    home_score_before=step.home_before,
                    away_score_before=step.away_before,
                    outs_before=step.before.outs,
                    bases_before=step.before.runners_code,
                    we_before=before,
                    we_after=after,
                    leverage_index=self._calculator.leverage_index(step.before),
                    we_change=after - before,
                    batter_id=step.event.batter_id,
                    pitcher_id=step.event.pitcher_id,
                    description=step.event.description,
                )
            )
        return leverages

    def _lookup(self, steps: list[_Step]) -> tuple[list[float], list[float]]:
        live_after = [s.after for s in steps if isinstance(s.after, GameState)]
        states = [s.before for s in steps] + live_after
        lookups = self._model.batch_get(states) if states else []
        we_before = [we.home_win_probability for we in lookups[: len(steps)]]
        remaining = iter(we.home_win_probability for we in lookups[len(steps) :])
        we_after = [s.after if isinstance(s.after, float) else next(remaining) for s in steps]
        return we_before, we_after

    def _walk(self, events: Sequence[PlayEvent], season: int | None) -> list[_Step]:
        steps: list[_Step] = []
        if not events:
            return steps

        game_id = events[0].game_id
        current = GameState(inning=1, top_of_inning=True, year=season)
        home, away = 0, 0
        last_index: int | None = None
        decided = False

        for event in events:
            if event.game_id != game_id:
                raise MalformedEventSequence(
                    f"event belongs to game {event.game_id}", game_id=game_id, event_index=event.event_index
                )
            if last_index is not None and event.event_index <= last_index:
                raise MalformedEventSequence(
                    f"event index does not increase (previous {last_index})",
                    game_id=game_id,
                    event_index=event.event_index,
                )
            if decided:
                raise MalformedEventSequence(
                    "event after the game was decided", game_id=game_id, event_index=event.event_index
                )
            if (event.inning, event.top_of_inning) != (current.inning, current.top_of_inning):
                expected = "top" if current.top_of_inning else "bottom"
                raise MalformedEventSequence(
                    f"expected {expected} of inning {current.inning}",
                    game_id=game_id,
                    event_index=event.event_index,
                )
            if not current.outs <= event.outs_after <= 3:
                raise MalformedEventSequence(
                    f"outs went from {current.outs} to {event.outs_after}",
                    game_id=game_id,
                    event_index=event.event_index,
                )
            self._check_scores(event, home, away, game_id)

            after = GameState(
                inning=event.inning,
                top_of_inning=event.top_of_inning,
                outs=event.outs_after,
                on_first=event.bases_after[0],
                on_second=event.bases_after[1],
                on_third=event.bases_after[2],
                score_diff=event.home_score_after - event.away_score_after,
                year=season,
            )
            settled = settle(after)
            steps.append(_Step(event=event, before=current, home_before=home, away_before=away, after=settled))

            last_index = event.event_index
            home, away = event.home_score_after, event.away_score_after
            if isinstance(settled, float):
                decided = True
            else:
                current = settled
        return steps

    @staticmethod
    def _check_scores(event: PlayEvent, home: int, away: int, game_id: str) -> None:
        if event.home_score_after < home or event.away_score_after < away:
            raise MalformedEventSequence(
                f"score went backward to {event.away_score_after}-{event.home_score_after}",
                game_id=game_id,
                event_index=event.event_index,
            )
        fielding_score_changed = (
            event.home_score_after != home if event.top_of_inning else event.away_score_after != away
        )
        if fielding_score_changed:
            raise MalformedEventSequence(
                "fielding team scored", game_id=game_id, event_index=event.event_index
            )
