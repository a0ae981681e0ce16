import pytest

from sabermetric_engine.domain.pitching_stats import PitchingLine
from sabermetric_engine.exceptions import InvalidSnapshot


class TestPitchingLine:
    def test_innings_pitched_from_outs(self) -> None:
        assert PitchingLine(ip_outs=20).innings_pitched == pytest.approx(20 / 3)

    def test_negative_tally_rejected(self) -> None:
        with pytest.raises(InvalidSnapshot, match="'so' is negative"):
            PitchingLine(ip_outs=3, so=-1)

    def test_earned_runs_cannot_exceed_runs(self) -> None:
        with pytest.raises(InvalidSnapshot, match="ER"):
            PitchingLine(ip_outs=3, r=1, er=2)

    def test_home_runs_cannot_exceed_hits(self) -> None:
        with pytest.raises(InvalidSnapshot, match="HR"):
            PitchingLine(ip_outs=3, h=1, hr=2)

    def test_fly_balls_optional(self) -> None:
        assert PitchingLine().fb is None
        assert PitchingLine(fb=40).fb == 40
