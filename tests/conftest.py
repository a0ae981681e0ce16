"""Shared pytest fixtures: constants and a complete synthetic win-expectancy table."""

import pytest

from sabermetric_engine.constants.provider import ConstantsProvider
from sabermetric_engine.domain.constants import LeagueConstant, SeasonConstants, WOBAConstant
from sabermetric_engine.domain.game_state import WinExpectancyTable
from sabermetric_engine.win_expectancy.model import WinExpectancyModel
from tests.helpers import make_synthetic_table


@pytest.fixture(scope="session")
def we_table() -> WinExpectancyTable:
    return make_synthetic_table()


@pytest.fixture(scope="session")
def we_model(we_table: WinExpectancyTable) -> WinExpectancyModel:
    return WinExpectancyModel([we_table])


@pytest.fixture
def woba_2024() -> WOBAConstant:
    return WOBAConstant(
        season=2024,
        w_bb=0.692,
        w_hbp=0.723,
        w_1b=0.883,
        w_2b=1.252,
        w_3b=1.584,
        w_hr=2.011,
        woba_scale=1.190,
        woba=0.315,
        run_sb=0.202,
        run_cs=-0.422,
        r_pa=0.121,
        r_w=9.85,
        c_fip=3.140,
        lg_hr_per_fb=0.115,
    )


@pytest.fixture
def woba_2023() -> WOBAConstant:
    return WOBAConstant(
        season=2023,
        w_bb=0.690,
        w_hbp=0.720,
        w_1b=0.880,
        w_2b=1.247,
        w_3b=1.578,
        w_hr=2.004,
        woba_scale=1.185,
        woba=0.313,
        run_sb=0.200,
        run_cs=-0.420,
        r_pa=0.119,
        r_w=9.80,
        c_fip=3.132,
    )


@pytest.fixture
def league_2024_al() -> LeagueConstant:
    return LeagueConstant(
        season=2024,
        league="AL",
        woba_avg=0.316,
        wrc_per_pa=0.1215,
        runs_per_win=9.85,
        replacement_runs_per_pa=-0.031,
        era=4.00,
        ra9=4.35,
    )


@pytest.fixture
def constants_2024(woba_2024: WOBAConstant, league_2024_al: LeagueConstant) -> SeasonConstants:
    return SeasonConstants(woba=woba_2024, league=league_2024_al)


@pytest.fixture
def constants_provider(
    woba_2024: WOBAConstant, woba_2023: WOBAConstant, league_2024_al: LeagueConstant
) -> ConstantsProvider:
    return ConstantsProvider([woba_2023, woba_2024], [league_2024_al])
