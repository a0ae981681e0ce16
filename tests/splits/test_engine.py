from datetime import date

import pytest

from sabermetric_engine.domain.batting_stats import BattingLine
from sabermetric_engine.domain.constants import SeasonConstants
from sabermetric_engine.domain.game_logs import SplitRow
from sabermetric_engine.domain.split import SplitDimension, SplitEntityType
from sabermetric_engine.splits.engine import SplitEngine


def _make_row(
    game_id: str,
    game_date: date,
    *,
    home: bool = True,
    pa: int = 4,
    ab: int = 4,
    h: int = 1,
    hr: int = 0,
    bb: int = 0,
    batter_hand: str | None = "R",
    pitcher_hand: str | None = "R",
    batting_order: int | None = 3,
) -> SplitRow:
    return SplitRow(
        game_id=game_id,
        game_date=game_date,
        home=home,
        line=BattingLine(pa=pa, ab=ab, h=h, hr=hr, bb=bb),
        batter_hand=batter_hand,
        pitcher_hand=pitcher_hand,
        batting_order=batting_order,
    )


def _rows() -> list[SplitRow]:
    return [
        _make_row("g1", date(2024, 4, 2), home=False, h=2, hr=1, pitcher_hand="L"),
        _make_row("g2", date(2024, 4, 3), home=True, h=0, pa=5, ab=4, bb=1),
        _make_row("g3", date(2024, 5, 1), home=True, h=3, pitcher_hand="L", batting_order=2),
        _make_row("g4", date(2024, 5, 2), home=False, h=1, pitcher_hand=None),
    ]


class TestSplitEngine:
    def test_home_away_in_first_seen_order(self) -> None:
        result = SplitEngine().split("judgea01", 2024, SplitDimension.HOME_AWAY, _rows())
        assert [g.key for g in result.groups] == ["away", "home"]
        away = result.group("away")
        assert away is not None
        assert away.label == "Away"
        assert (away.games, away.pa, away.ab, away.h, away.hr) == (2, 8, 8, 3, 1)
        assert away.avg == pytest.approx(3 / 8)

    def test_group_rates_recomputed_from_sums(self) -> None:
        home = SplitEngine().split("judgea01", 2024, SplitDimension.HOME_AWAY, _rows()).group("home")
        assert home is not None
        assert home.obp == pytest.approx(4 / 9)
        assert home.slg == pytest.approx(3 / 8)
        assert home.ops == pytest.approx(home.obp + home.slg)

    def test_pitcher_hand_skips_unknown(self) -> None:
        result = SplitEngine().split("judgea01", 2024, SplitDimension.PITCHER_HANDED, _rows())
        assert [g.key for g in result.groups] == ["vs_LHP", "vs_RHP"]
        assert sum(g.pa for g in result.groups) == 13

    def test_batter_hand(self) -> None:
        rows = [_make_row("g1", date(2024, 4, 2), batter_hand="s"), _make_row("g2", date(2024, 4, 3), batter_hand="x")]
        result = SplitEngine().split("switch", 2024, SplitDimension.BATTER_HANDED, rows)
        assert [(g.key, g.label) for g in result.groups] == [("as_SHB", "As SHB")]
        assert result.groups[0].meta == {"hand": "S"}

    def test_month(self) -> None:
        result = SplitEngine().split("judgea01", 2024, SplitDimension.MONTH, _rows())
        assert [(g.key, g.label) for g in result.groups] == [("04", "April"), ("05", "May")]

    def test_batting_order(self) -> None:
        rows = [*_rows(), _make_row("g5", date(2024, 5, 3), batting_order=None)]
        result = SplitEngine().split("judgea01", 2024, SplitDimension.BATTING_ORDER, rows)
        assert [g.key for g in result.groups] == ["3", "2"]
        assert result.group("3").label == "Batting #3"
        assert result.group("3").games == 3

    def test_distinct_games_counted_once(self) -> None:
        rows = [_make_row("g1", date(2024, 4, 2), pa=1, ab=1), _make_row("g1", date(2024, 4, 2), pa=1, ab=1)]
        group = SplitEngine().split("judgea01", 2024, SplitDimension.HOME_AWAY, rows).groups[0]
        assert group.games == 1
        assert group.pa == 2

    def test_woba_only_with_constants(self, constants_2024: SeasonConstants) -> None:
        engine = SplitEngine()
        without = engine.split("judgea01", 2024, SplitDimension.HOME_AWAY, _rows())
        assert all(g.woba is None for g in without.groups)
        with_constants = engine.split("judgea01", 2024, SplitDimension.HOME_AWAY, _rows(), constants_2024)
        home = with_constants.group("home")
        assert home is not None
        assert home.woba == pytest.approx((0.692 + 0.883 * 3) / 9)

    def test_result_metadata(self) -> None:
        result = SplitEngine().split("NYA", 2024, SplitDimension.MONTH, [], entity_type=SplitEntityType.TEAM)
        assert result.entity_type is SplitEntityType.TEAM
        assert result.groups == ()
        assert result.group("04") is None
