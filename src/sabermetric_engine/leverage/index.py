"""Leverage index from win-expectancy swings.

The swing of a state is the expected absolute change in home win expectancy
over one plate appearance, using league outcome frequencies and standard
base-advancement rules. Leverage index is that swing divided by the mean swing
of a reference distribution of states (one reference per season).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum

import numpy as np

from sabermetric_engine.domain.game_state import GameState
from sabermetric_engine.domain.plays import LeverageReference
from sabermetric_engine.exceptions import InvalidContext
from sabermetric_engine.win_expectancy.model import WinExpectancyModel


class PlateAppearanceOutcome(StrEnum):
    OUT = "out"
    STRIKEOUT = "strikeout"
    WALK = "walk"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOME_RUN = "home_run"


# League per-PA outcome frequencies (HBP folded into walks).
DEFAULT_OUTCOME_FREQUENCIES: Mapping[PlateAppearanceOutcome, float] = {
    PlateAppearanceOutcome.OUT: 0.458,
    PlateAppearanceOutcome.STRIKEOUT: 0.227,
    PlateAppearanceOutcome.WALK: 0.096,
    PlateAppearanceOutcome.SINGLE: 0.140,
    PlateAppearanceOutcome.DOUBLE: 0.044,
    PlateAppearanceOutcome.TRIPLE: 0.004,
    PlateAppearanceOutcome.HOME_RUN: 0.031,
}


def next_half_inning(state: GameState) -> GameState:
    if state.top_of_inning:
        return GameState(inning=state.inning, top_of_inning=False, score_diff=state.score_diff, year=state.year)
    return GameState(inning=state.inning + 1, top_of_inning=True, score_diff=state.score_diff, year=state.year)


def terminal_home_win_probability(state: GameState) -> float | None:
    """Return 1.0/0.0 when a post-play state decides the game, else None.

    ``state.outs`` may be 3 here: the play that ended a half-inning.
    """
    if not state.top_of_inning and state.inning >= 9 and state.score_diff > 0:
        return 1.0
    if state.outs >= 3 and state.inning >= 9:
        if state.top_of_inning and state.score_diff > 0:
            return 1.0
        if not state.top_of_inning and state.score_diff < 0:
            return 0.0
    return None


def settle(state: GameState) -> GameState | float:
    """Normalize a post-play state into a terminal probability or a live lookup state."""
    terminal = terminal_home_win_probability(state)
    if terminal is not None:
        return terminal
    if state.outs >= 3:
        return next_half_inning(state)
    return state


def apply_outcome(state: GameState, outcome: PlateAppearanceOutcome) -> GameState:
    """Post-play state (possibly with 3 outs) for a live pre-play state."""
    first, second, third = state.on_first, state.on_second, state.on_third
    runs = 0
    outs = state.outs
    match outcome:
        case PlateAppearanceOutcome.OUT | PlateAppearanceOutcome.STRIKEOUT:
            outs += 1
        case PlateAppearanceOutcome.WALK:
            if first and second and third:
                runs = 1
            third = third or (first and second)
            second = second or first
            first = True
        case PlateAppearanceOutcome.SINGLE:
            runs = int(second) + int(third)
            first, second, third = True, first, False
        case PlateAppearanceOutcome.DOUBLE:
            runs = int(second) + int(third)
            first, second, third = False, True, first
        case PlateAppearanceOutcome.TRIPLE:
            runs = int(first) + int(second) + int(third)
            first, second, third = False, False, True
        case PlateAppearanceOutcome.HOME_RUN:
            runs = int(first) + int(second) + int(third) + 1
            first, second, third = False, False, False

    diff = state.score_diff - runs if state.top_of_inning else state.score_diff + runs
    return replace(state, outs=outs, on_first=first, on_second=second, on_third=third, score_diff=diff)


@dataclass(frozen=True)
class _Transition:
    probability: float
    result: GameState | float


def _transitions(
    state: GameState,
    frequencies: Mapping[PlateAppearanceOutcome, float],
) -> list[_Transition]:
    return [_Transition(p, settle(apply_outcome(state, outcome))) for outcome, p in frequencies.items()]


def expected_swing(
    model: WinExpectancyModel,
    state: GameState,
    frequencies: Mapping[PlateAppearanceOutcome, float] = DEFAULT_OUTCOME_FREQUENCIES,
) -> float:
    """Expected |dWE| of one plate appearance from a live state."""
    transitions = _transitions(state, frequencies)
    live = [t.result for t in transitions if isinstance(t.result, GameState)]
    lookups = iter(model.batch_get([state, *live]))
    we_before = next(lookups).home_win_probability
    swing = 0.0
    for t in transitions:
        we_after = t.result if isinstance(t.result, float) else next(lookups).home_win_probability
        swing += t.probability * abs(we_after - we_before)
    return swing


def compute_reference(
    model: WinExpectancyModel,
    state_counts: Mapping[GameState, int] | Iterable[tuple[GameState, int]],
    season: int,
    frequencies: Mapping[PlateAppearanceOutcome, float] = DEFAULT_OUTCOME_FREQUENCIES,
) -> LeverageReference:
    """Mean swing over a season's observed distribution of pre-PA states."""
    pairs = list(state_counts.items()) if isinstance(state_counts, Mapping) else list(state_counts)
    pairs = [(state, count) for state, count in pairs if count > 0]
    if not pairs:
        raise InvalidContext(f"Empty state distribution for leverage reference in {season}")
    swings = np.array([expected_swing(model, state, frequencies) for state, _ in pairs])
    weights = np.array([count for _, count in pairs], dtype=float)
    return LeverageReference(season=season, mean_swing=float(np.average(swings, weights=weights)))


class LeverageIndexCalculator:
    def __init__(
        self,
        model: WinExpectancyModel,
        reference: LeverageReference,
        frequencies: Mapping[PlateAppearanceOutcome, float] = DEFAULT_OUTCOME_FREQUENCIES,
    ) -> None:
        if reference.mean_swing <= 0:
            raise InvalidContext(f"Leverage reference for {reference.season} has non-positive mean swing")
        self._model = model
        self._reference = reference
        self._frequencies = frequencies

    @property
    def reference(self) -> LeverageReference:
        return self._reference

    def leverage_index(self, state: GameState) -> float:
        return expected_swing(self._model, state, self._frequencies) / self._reference.mean_swing
