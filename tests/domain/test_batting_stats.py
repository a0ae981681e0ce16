import pytest

from sabermetric_engine.domain.batting_stats import BattingLine
from sabermetric_engine.exceptions import InvalidSnapshot


class TestBattingLine:
    def test_defaults_to_empty_line(self) -> None:
        line = BattingLine()
        assert line.pa == 0
        assert line.fb is None
        assert line.singles == 0
        assert line.total_bases == 0

    def test_singles_and_total_bases(self) -> None:
        line = BattingLine(pa=10, ab=9, h=5, doubles=1, triples=1, hr=1)
        assert line.singles == 2
        assert line.total_bases == 2 + 2 + 3 + 4

    def test_unintentional_walks(self) -> None:
        line = BattingLine(pa=10, ab=6, bb=4, ibb=1)
        assert line.unintentional_bb == 3

    def test_frozen(self) -> None:
        line = BattingLine(pa=1, ab=1)
        with pytest.raises(AttributeError):
            line.pa = 2  # type: ignore[misc]

    def test_negative_tally_rejected(self) -> None:
        with pytest.raises(InvalidSnapshot, match="'hr' is negative"):
            BattingLine(pa=1, ab=1, hr=-1)

    def test_ab_cannot_exceed_pa(self) -> None:
        with pytest.raises(InvalidSnapshot, match="AB"):
            BattingLine(pa=3, ab=4)

    def test_hits_cannot_exceed_ab(self) -> None:
        with pytest.raises(InvalidSnapshot, match="H"):
            BattingLine(pa=4, ab=3, h=4)

    def test_extra_base_hits_cannot_exceed_hits(self) -> None:
        with pytest.raises(InvalidSnapshot):
            BattingLine(pa=4, ab=4, h=1, doubles=1, hr=1)

    def test_ibb_cannot_exceed_bb(self) -> None:
        with pytest.raises(InvalidSnapshot):
            BattingLine(pa=2, bb=1, ibb=2)

    def test_add_sums_every_tally(self) -> None:
        a = BattingLine(pa=5, ab=4, h=2, hr=1, bb=1, fb=2)
        b = BattingLine(pa=4, ab=4, h=1, doubles=1, so=2)
        total = a + b
        assert total.pa == 9
        assert total.ab == 8
        assert total.h == 3
        assert total.hr == 1
        assert total.doubles == 1
        assert total.so == 2
        assert total.fb == 2

    def test_add_keeps_unknown_fly_balls_unknown(self) -> None:
        assert (BattingLine() + BattingLine()).fb is None
