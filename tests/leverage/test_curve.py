import pytest

from sabermetric_engine.domain.game_state import GameState
from sabermetric_engine.domain.plays import PlayEvent
from sabermetric_engine.exceptions import InvalidContext, MalformedEventSequence
from sabermetric_engine.leverage.curve import LeverageCurveBuilder
from sabermetric_engine.leverage.index import compute_reference
from sabermetric_engine.win_expectancy.model import WinExpectancyModel
from tests.helpers import make_event


def _quiet_innings(through_inning: int, *, through_top: bool = False, start_index: int = 1) -> list[PlayEvent]:
    """Three-up three-down half innings from the top of the first."""
    events: list[PlayEvent] = []
    index = start_index
    for inning in range(1, through_inning + 1):
        halves = (True,) if inning == through_inning and through_top else (True, False)
        for top in halves:
            for outs in (1, 2, 3):
                events.append(make_event(index, inning, top, outs))
                index += 1
    return events


def _walk_off_game() -> list[PlayEvent]:
    events = _quiet_innings(9, through_top=True)
    index = len(events) + 1
    events.append(make_event(index, 9, False, 0, (True, False, False)))
    events.append(make_event(index + 1, 9, False, 0, home=1))
    return events


@pytest.fixture
def builder(we_model: WinExpectancyModel) -> LeverageCurveBuilder:
    reference = compute_reference(we_model, {GameState(inning=1, top_of_inning=True): 1}, 2024)
    return LeverageCurveBuilder(we_model, reference)


class TestBuildCurve:
    def test_one_point_per_event(self, builder: LeverageCurveBuilder) -> None:
        events = _quiet_innings(2)
        curve = builder.build_curve(events, season=2024)
        assert curve.game_id == "NYA202404010"
        assert curve.season == 2024
        assert [p.event_index for p in curve.points] == [e.event_index for e in events]

    def test_probabilities_are_complementary(self, builder: LeverageCurveBuilder) -> None:
        for point in builder.build_curve(_walk_off_game()).points:
            assert 0.0 <= point.home_win_prob <= 1.0
            assert point.home_win_prob + point.away_win_prob == pytest.approx(1.0)

    def test_start_is_opening_state(self, builder: LeverageCurveBuilder, we_model: WinExpectancyModel) -> None:
        opening = we_model.get(GameState(inning=1, top_of_inning=True)).home_win_probability
        assert builder.build_curve(_quiet_innings(1)).home_win_prob_start == opening

    def test_walk_off_ends_at_certainty(self, builder: LeverageCurveBuilder) -> None:
        curve = builder.build_curve(_walk_off_game())
        last = curve.points[-1]
        assert last.home_win_prob == 1.0
        assert last.away_win_prob == 0.0
        assert last.home_score == 1
        assert last.bases == "___"

    def test_bases_rendered(self, builder: LeverageCurveBuilder) -> None:
        curve = builder.build_curve(_walk_off_game())
        assert curve.points[-2].bases == "1__"

    def test_empty_game(self, builder: LeverageCurveBuilder, we_model: WinExpectancyModel) -> None:
        curve = builder.build_curve([])
        assert curve.points == ()
        assert curve.game_id == ""
        assert curve.home_win_prob_start == we_model.get(GameState(inning=1, top_of_inning=True)).home_win_probability


class TestMalformedSequences:
    def test_non_increasing_index(self, builder: LeverageCurveBuilder) -> None:
        events = [make_event(1, 1, True, 1), make_event(3, 1, True, 2), make_event(2, 1, True, 3)]
        with pytest.raises(MalformedEventSequence) as exc_info:
            builder.build_curve(events)
        assert exc_info.value.event_index == 2
        assert exc_info.value.game_id == "NYA202404010"

    def test_mixed_games(self, builder: LeverageCurveBuilder) -> None:
        events = [make_event(1, 1, True, 1), make_event(2, 1, True, 2, game_id="BOS202404010")]
        with pytest.raises(MalformedEventSequence, match="BOS202404010"):
            builder.build_curve(events)

    def test_wrong_half_inning(self, builder: LeverageCurveBuilder) -> None:
        with pytest.raises(MalformedEventSequence, match="expected top of inning 1"):
            builder.build_curve([make_event(1, 1, False, 1)])

    def test_outs_go_backward(self, builder: LeverageCurveBuilder) -> None:
        events = [make_event(1, 1, True, 2), make_event(2, 1, True, 1)]
        with pytest.raises(MalformedEventSequence, match="outs"):
            builder.build_curve(events)

    def test_score_goes_backward(self, builder: LeverageCurveBuilder) -> None:
        events = [make_event(1, 1, True, 0, away=2), make_event(2, 1, True, 1, away=1)]
        with pytest.raises(MalformedEventSequence, match="backward"):
            builder.build_curve(events)

    def test_fielding_team_cannot_score(self, builder: LeverageCurveBuilder) -> None:
        with pytest.raises(MalformedEventSequence, match="fielding"):
            builder.build_curve([make_event(1, 1, True, 1, home=1)])

    def test_event_after_walk_off(self, builder: LeverageCurveBuilder) -> None:
        events = _walk_off_game()
        events.append(make_event(events[-1].event_index + 1, 9, False, 1, home=1))
        with pytest.raises(MalformedEventSequence, match="decided"):
            builder.build_curve(events)


class TestBuildLeverages:
    def test_requires_reference(self, we_model: WinExpectancyModel) -> None:
        with pytest.raises(InvalidContext):
            LeverageCurveBuilder(we_model).build_leverages(_quiet_innings(1))

    def test_before_state_and_change(self, builder: LeverageCurveBuilder) -> None:
        leverages = builder.build_leverages(_walk_off_game(), season=2024)
        assert len(leverages) == len(_walk_off_game())
        first = leverages[0]
        assert (first.inning, first.top_of_inning, first.outs_before, first.bases_before) == (1, True, 0, "___")
        for pa in leverages:
            assert pa.we_change == pytest.approx(pa.we_after - pa.we_before)
            assert pa.leverage_index > 0.0

    def test_walk_off_plate_appearance(self, builder: LeverageCurveBuilder) -> None:
        walk_off = builder.build_leverages(_walk_off_game())[-1]
        assert walk_off.bases_before == "1__"
        assert walk_off.home_score_before == 0
        assert walk_off.we_after == 1.0
        assert walk_off.we_change > 0.0
        assert walk_off.batter_id == "batter1"

    def test_half_inning_change_resets_bases(self, builder: LeverageCurveBuilder) -> None:
        leverages = builder.build_leverages(_quiet_innings(1))
        bottom_first = leverages[3]
        assert not bottom_first.top_of_inning
        assert bottom_first.outs_before == 0

    def test_ninth_inning_outweighs_first(self, builder: LeverageCurveBuilder) -> None:
        leverages = builder.build_leverages(_walk_off_game())
        assert leverages[-1].leverage_index > leverages[0].leverage_index
