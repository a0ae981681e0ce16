from dataclasses import replace

import pytest

from sabermetric_engine.derivation.batting import derive_batting, weighted_runs_created_plus
from sabermetric_engine.derivation.rates import woba
from sabermetric_engine.domain.batting_stats import BattingLine
from sabermetric_engine.domain.constants import LeagueConstant, SeasonConstants, WOBAConstant
from sabermetric_engine.domain.context import StatContext, StatProvider
from sabermetric_engine.domain.park_factor import ParkFactor
from sabermetric_engine.exceptions import InvalidContext


def _make_line() -> BattingLine:
    return BattingLine(pa=600, ab=520, h=150, doubles=30, triples=3, hr=25, bb=60, ibb=5, hbp=10, sf=6, sh=4, so=120)


def _make_park(runs_factor: float) -> ParkFactor:
    return ParkFactor(
        park_id="COL02",
        season=2024,
        runs_factor=runs_factor,
        hr_factor=100.0,
        bb_factor=100.0,
        h_factor=100.0,
        games_sampled=81,
    )


_CONTEXT = StatContext(season=2024, provider=StatProvider.FANGRAPHS, league="AL")


class TestWeightedRunsCreatedPlus:
    def test_league_average_in_neutral_park(self) -> None:
        assert weighted_runs_created_plus(0.0, 600, 0.12, 100.0) == pytest.approx(100.0)

    def test_hitter_park_lowers_index(self) -> None:
        assert weighted_runs_created_plus(0.0, 600, 0.12, 110.0) == pytest.approx(90.0)

    def test_above_average_hitter(self) -> None:
        assert weighted_runs_created_plus(12.0, 600, 0.12, 100.0) == pytest.approx(100 * (0.02 + 0.12) / 0.12)

    def test_undefined_without_plate_appearances(self) -> None:
        assert weighted_runs_created_plus(0.0, 0, 0.12, 100.0) is None
        assert weighted_runs_created_plus(1.0, 10, 0.0, 100.0) is None


class TestDeriveBatting:
    def test_rates_and_run_values(self, constants_2024: SeasonConstants) -> None:
        line = _make_line()
        stats = derive_batting("judgea01", line, _CONTEXT, constants_2024, team_id="NYA")
        expected_woba = (0.692 * 55 + 0.723 * 10 + 0.883 * 92 + 1.252 * 30 + 1.584 * 3 + 2.011 * 25) / 600
        assert stats.woba == pytest.approx(expected_woba)
        assert stats.wraa == pytest.approx((expected_woba - 0.316) / 1.190 * 600)
        assert stats.wrc == pytest.approx(stats.wraa + 0.1215 * 600)
        assert stats.wrc_plus == pytest.approx(100 * (stats.wraa / 600 + 0.1215) / 0.1215)
        assert stats.k_rate == pytest.approx(0.2)
        assert stats.team_id == "NYA"
        assert stats.context == _CONTEXT
        assert stats.line is line
        assert stats.hr_fb is None

    def test_park_factor_applied(self, constants_2024: SeasonConstants) -> None:
        neutral = derive_batting("judgea01", _make_line(), _CONTEXT, constants_2024)
        coors = derive_batting("judgea01", _make_line(), _CONTEXT, constants_2024, _make_park(115.0))
        assert coors.woba == neutral.woba
        assert coors.wrc_plus is not None and neutral.wrc_plus is not None
        assert coors.wrc_plus == pytest.approx(neutral.wrc_plus - 15.0)

    def test_empty_line(self, constants_2024: SeasonConstants) -> None:
        stats = derive_batting("nobody", BattingLine(), _CONTEXT, constants_2024)
        assert (stats.avg, stats.obp, stats.slg, stats.babip, stats.woba) == (0.0, 0.0, 0.0, 0.0, 0.0)
        assert stats.wraa == 0.0
        assert stats.wrc == 0.0
        assert stats.wrc_plus is None

    def test_no_at_bats(self, constants_2024: SeasonConstants) -> None:
        stats = derive_batting("walker", BattingLine(pa=2, bb=2), _CONTEXT, constants_2024)
        assert stats.avg == 0.0
        assert stats.slg == 0.0
        assert stats.obp == 1.0

    def test_season_constants_without_league(self, woba_2024: WOBAConstant) -> None:
        stats = derive_batting("judgea01", _make_line(), StatContext(season=2024), SeasonConstants(woba=woba_2024))
        assert stats.wrc == pytest.approx(stats.wraa + 0.121 * 600)

    def test_deterministic(self, constants_2024: SeasonConstants) -> None:
        assert derive_batting("judgea01", _make_line(), _CONTEXT, constants_2024) == derive_batting(
            "judgea01", _make_line(), _CONTEXT, constants_2024
        )

    def test_park_factor_on_neutral_context(self, constants_2024: SeasonConstants) -> None:
        context = StatContext(season=2024, park_neutral=True)
        with pytest.raises(InvalidContext, match="park-neutral"):
            derive_batting("judgea01", _make_line(), context, constants_2024, _make_park(105.0))

    def test_season_mismatch(self, constants_2024: SeasonConstants) -> None:
        with pytest.raises(InvalidContext, match="season"):
            derive_batting("judgea01", _make_line(), StatContext(season=2023), constants_2024)

    def test_league_mismatch(self, constants_2024: SeasonConstants) -> None:
        with pytest.raises(InvalidContext, match="league"):
            derive_batting("judgea01", _make_line(), StatContext(season=2024, league="NL"), constants_2024)

    def test_fallback_constants_accepted(self, woba_2024: WOBAConstant) -> None:
        constants = SeasonConstants(woba=woba_2024, fallback_from=2025)
        stats = derive_batting("judgea01", _make_line(), StatContext(season=2025), constants)
        assert stats.context.season == 2025

    def test_multi_year_context(self, constants_2024: SeasonConstants) -> None:
        stats = derive_batting("judgea01", _make_line(), StatContext(season=0), constants_2024)
        assert stats.context.is_multi_year

    def test_season_weights_without_league_use_season_woba(self, woba_2024: WOBAConstant) -> None:
        stats = derive_batting("judgea01", _make_line(), StatContext(season=2024), SeasonConstants(woba=woba_2024))
        assert stats.wraa == pytest.approx((stats.woba - 0.315) / 1.190 * 600)


def _league_totals() -> BattingLine:
    return (
        _make_line()
        + BattingLine(pa=550, ab=500, h=120, doubles=22, triples=1, hr=12, bb=40, ibb=2, hbp=4, sf=4, sh=2, so=140)
        + BattingLine(pa=480, ab=430, h=118, doubles=19, triples=5, hr=6, bb=38, ibb=0, hbp=6, sf=3, sh=3, so=80)
    )


class TestLeagueAverageSnapshot:
    def test_season_weights_reproduce_league_average(self, woba_2024: WOBAConstant) -> None:
        totals = _league_totals()
        weights = replace(woba_2024, woba=woba(totals, woba_2024))
        stats = derive_batting("league", totals, StatContext(season=2024), SeasonConstants(woba=weights))
        assert stats.woba == pytest.approx(weights.woba)
        assert stats.wraa == pytest.approx(0.0, abs=1e-9)
        assert stats.wrc_plus == pytest.approx(100.0)

    def test_league_constant_baseline_reproduces_league_average(self, woba_2024: WOBAConstant) -> None:
        totals = _league_totals()
        league = LeagueConstant(season=2024, league="AL", woba_avg=woba(totals, woba_2024), wrc_per_pa=0.118)
        context = StatContext(season=2024, league="AL")
        stats = derive_batting("league", totals, context, SeasonConstants(woba=woba_2024, league=league))
        assert stats.wraa == pytest.approx(0.0, abs=1e-9)
        assert stats.wrc == pytest.approx(0.118 * totals.pa)
        assert stats.wrc_plus == pytest.approx(100.0)
