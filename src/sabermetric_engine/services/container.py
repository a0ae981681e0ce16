"""Service facade that wires the engines from externally supplied tables."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import cached_property
from typing import cast

from sabermetric_engine.config import EngineSettings
from sabermetric_engine.constants.provider import ConstantsFallback, ConstantsProvider
from sabermetric_engine.derivation.batting import derive_batting
from sabermetric_engine.derivation.pitching import derive_pitching
from sabermetric_engine.domain.batting_stats import AdvancedBattingStats, BattingLine
from sabermetric_engine.domain.constants import LeagueConstant, SeasonConstants, WOBAConstant
from sabermetric_engine.domain.context import StatContext, StatProvider
from sabermetric_engine.domain.game_logs import (
    PlayerGameBatting,
    PlayerGamePitching,
    SplitRow,
    TeamGameResult,
)
from sabermetric_engine.domain.game_state import WinExpectancyEra, WinExpectancyTable
from sabermetric_engine.domain.park_factor import ParkFactor, ParkSeasonAggregate
from sabermetric_engine.domain.pitching_stats import AdvancedPitchingStats, PitchingLine
from sabermetric_engine.domain.plays import (
    LeverageReference,
    LeverageRole,
    PlateAppearanceLeverage,
    PlayerLeverageSummary,
    PlayEvent,
    WinProbabilityCurve,
)
from sabermetric_engine.domain.result import Err, Ok, Result
from sabermetric_engine.domain.run_differential import RunDifferentialSeries
from sabermetric_engine.domain.split import SplitDimension, SplitResult
from sabermetric_engine.domain.streak import Streak, StreakKind
from sabermetric_engine.domain.war import PlayerWARSummary
from sabermetric_engine.exceptions import InvalidContext, SaberError
from sabermetric_engine.leverage.curve import LeverageCurveBuilder
from sabermetric_engine.leverage.summary import summarize_player
from sabermetric_engine.park_factors.engine import ParkFactorEngine
from sabermetric_engine.run_differential.aggregator import DEFAULT_WINDOWS, RunDifferentialAggregator
from sabermetric_engine.splits.engine import SplitEngine
from sabermetric_engine.streaks.detector import StreakDetector, longest
from sabermetric_engine.war.aggregator import WARAggregator
from sabermetric_engine.war.components import fielding_runs, position_player_war
from sabermetric_engine.win_expectancy.builder import StateObservation, build_win_expectancy_table
from sabermetric_engine.win_expectancy.eras import ERAS, eras_for_year
from sabermetric_engine.win_expectancy.model import WinExpectancyModel

logger = logging.getLogger(__name__)


class EngineContainer:
    """One synchronous call per derived entity, each returning a ``Result``.

    Engines are built lazily from the supplied read-only tables and shared by
    every call. Engine failures come back as ``Err(SaberError)``; anything
    else propagates.
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        woba_constants: Iterable[WOBAConstant] = (),
        league_constants: Iterable[LeagueConstant] = (),
        park_aggregates: Iterable[ParkSeasonAggregate] = (),
        win_expectancy_tables: Iterable[WinExpectancyTable] = (),
        win_expectancy_observations: Iterable[StateObservation] = (),
        leverage_references: Iterable[LeverageReference] = (),
        constants_fallback: ConstantsFallback = ConstantsFallback.NONE,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._woba_constants = list(woba_constants)
        self._league_constants = list(league_constants)
        self._park_aggregates = list(park_aggregates)
        self._win_expectancy_tables = list(win_expectancy_tables)
        self._win_expectancy_observations = list(win_expectancy_observations)
        self._leverage_references = {ref.season: ref for ref in leverage_references}
        self._constants_fallback = constants_fallback

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @cached_property
    def constants_provider(self) -> ConstantsProvider:
        return ConstantsProvider(self._woba_constants, self._league_constants)

    @cached_property
    def park_factor_engine(self) -> ParkFactorEngine:
        return ParkFactorEngine(
            self._park_aggregates,
            regression_games=self._settings.park_regression_games,
            min_games=self._settings.park_min_games,
        )

    @cached_property
    def win_expectancy_model(self) -> WinExpectancyModel:
        """Supplied tables plus tables built from observations for each catalogued era."""
        built = self._build_tables(self._win_expectancy_observations) if self._win_expectancy_observations else []
        return WinExpectancyModel(
            [*self._win_expectancy_tables, *built],
            score_diff_cap=self._settings.score_diff_cap,
            extra_innings_bucket=self._settings.extra_innings_bucket,
        )

    @cached_property
    def war_aggregator(self) -> WARAggregator:
        return WARAggregator(pitcher_replacement_runs_per_9=self._settings.pitcher_replacement_runs_per_9)

    @cached_property
    def split_engine(self) -> SplitEngine:
        return SplitEngine()

    @cached_property
    def streak_detector(self) -> StreakDetector:
        return StreakDetector()

    @cached_property
    def run_differential_aggregator(self) -> RunDifferentialAggregator:
        return RunDifferentialAggregator()

    @staticmethod
    def _catalogued_eras(observations: Sequence[StateObservation]) -> list[WinExpectancyEra]:
        # Observations without a year belong to every era.
        years = {obs.state.year for obs in observations}
        if None in years:
            return [era.to_win_expectancy_era() for era in ERAS]
        touched = {era for year in years if year is not None for era in eras_for_year(year)}
        return [era.to_win_expectancy_era() for era in ERAS if era in touched]

    def _build_tables(
        self, observations: Sequence[StateObservation], eras: Iterable[WinExpectancyEra] | None = None
    ) -> list[WinExpectancyTable]:
        if eras is None:
            eras = self._catalogued_eras(observations)
        tables = [
            build_win_expectancy_table(
                observations,
                era,
                min_sample_size=self._settings.win_expectancy_min_sample_size,
                score_diff_cap=self._settings.score_diff_cap,
                extra_innings_bucket=self._settings.extra_innings_bucket,
            )
            for era in eras
        ]
        return [table for table in tables if table.entries]

    def leverage_builder(self, season: int | None) -> LeverageCurveBuilder:
        reference = self._leverage_references.get(season) if season is not None else None
        return LeverageCurveBuilder(self.win_expectancy_model, reference)

    def _call[T](self, operation: str, fn: Callable[[], T]) -> Result[T, SaberError]:
        try:
            return Ok(fn())
        except SaberError as e:
            logger.warning("%s failed: %s", operation, e)
            return Err(e)

    def _constants(self, context: StatContext, constants_season: int | None) -> SeasonConstants:
        season = constants_season if constants_season is not None else context.season
        if season == 0:
            raise InvalidContext("Multi-year lines need an explicit constants season")
        return self.constants_provider.lookup(season, context.league, fallback=self._constants_fallback)

    def _park(self, context: StatContext, park_id: str | None) -> ParkFactor | None:
        if park_id is None or context.park_neutral:
            return None
        if context.is_multi_year:
            raise InvalidContext("Park adjustment of multi-year lines needs a multi-year park factor")
        return self.park_factor_engine.compute(park_id, context.season)

    # Derived stats

    def batting_stats(
        self,
        player_id: str,
        line: BattingLine,
        context: StatContext,
        *,
        park_id: str | None = None,
        team_id: str | None = None,
        constants_season: int | None = None,
    ) -> Result[AdvancedBattingStats, SaberError]:
        def run() -> AdvancedBattingStats:
            constants = self._constants(context, constants_season)
            return derive_batting(player_id, line, context, constants, self._park(context, park_id), team_id=team_id)

        return self._call("batting_stats", run)

    def pitching_stats(
        self,
        player_id: str,
        line: PitchingLine,
        context: StatContext,
        *,
        park_id: str | None = None,
        team_id: str | None = None,
        constants_season: int | None = None,
    ) -> Result[AdvancedPitchingStats, SaberError]:
        def run() -> AdvancedPitchingStats:
            constants = self._constants(context, constants_season)
            return derive_pitching(player_id, line, context, constants, self._park(context, park_id), team_id=team_id)

        return self._call("pitching_stats", run)

    def war_summary(
        self,
        player_id: str,
        line: BattingLine,
        context: StatContext,
        *,
        position: str | None = None,
        games: int = 0,
        putouts: int | None = None,
        assists: int | None = None,
        league_range_factor: float | None = None,
        park_id: str | None = None,
        team_id: str | None = None,
        constants_season: int | None = None,
    ) -> Result[PlayerWARSummary, SaberError]:
        """Position-player WAR.

        Fielding runs are included only when putouts, assists and the league
        range factor are all given.
        """

        def run() -> PlayerWARSummary:
            constants = self._constants(context, constants_season)
            stats = derive_batting(player_id, line, context, constants, self._park(context, park_id), team_id=team_id)
            fielding = None
            if putouts is not None and assists is not None and league_range_factor is not None:
                fielding = fielding_runs(
                    putouts, assists, games, league_range_factor, self._settings.fielding_runs_per_play
                )
            return position_player_war(
                stats,
                constants,
                aggregator=self.war_aggregator,
                position=position,
                games=games,
                fielding=fielding,
                default_replacement_runs_per_pa=self._settings.replacement_runs_per_pa,
            )

        return self._call("war_summary", run)

    def pitcher_war_summary(
        self,
        player_id: str,
        line: PitchingLine,
        context: StatContext,
        *,
        provider: StatProvider | None = None,
        park_id: str | None = None,
        team_id: str | None = None,
        constants_season: int | None = None,
    ) -> Result[PlayerWARSummary, SaberError]:
        def run() -> PlayerWARSummary:
            constants = self._constants(context, constants_season)
            park = self._park(context, park_id)
            stats = derive_pitching(player_id, line, context, constants, park, team_id=team_id)
            return self.war_aggregator.aggregate_pitcher(stats, constants, provider=provider)

        return self._call("pitcher_war_summary", run)

    # Play-by-play

    def win_expectancy_tables(
        self, observations: Iterable[StateObservation], *, eras: Iterable[WinExpectancyEra] | None = None
    ) -> Result[list[WinExpectancyTable], SaberError]:
        """Build one table per era (the catalogued eras by default), skipping eras with no sample."""
        return self._call("win_expectancy_tables", lambda: self._build_tables(list(observations), eras))

    def win_probability_curve(
        self, events: Sequence[PlayEvent], *, season: int | None = None
    ) -> Result[WinProbabilityCurve, SaberError]:
        return self._call(
            "win_probability_curve",
            lambda: self.leverage_builder(season).build_curve(events, season=season),
        )

    def plate_leverages(
        self, events: Sequence[PlayEvent], *, season: int
    ) -> Result[list[PlateAppearanceLeverage], SaberError]:
        return self._call(
            "plate_leverages",
            lambda: self.leverage_builder(season).build_leverages(events, season=season),
        )

    def player_leverage_summary(
        self,
        leverages: Iterable[PlateAppearanceLeverage],
        player_id: str,
        role: LeverageRole,
    ) -> Result[PlayerLeverageSummary, SaberError]:
        return self._call(
            "player_leverage_summary",
            lambda: summarize_player(
                leverages,
                player_id,
                role,
                low=self._settings.low_leverage_threshold,
                high=self._settings.high_leverage_threshold,
            ),
        )

    # Park factors

    def park_factor(self, park_id: str, season: int) -> Result[ParkFactor, SaberError]:
        return self._call("park_factor", lambda: self.park_factor_engine.compute(park_id, season))

    def multi_year_park_factor(
        self, park_id: str, from_season: int, to_season: int
    ) -> Result[ParkFactor, SaberError]:
        return self._call(
            "multi_year_park_factor",
            lambda: self.park_factor_engine.compute_multi_year(park_id, from_season, to_season),
        )

    # Feed aggregations

    def splits(
        self,
        entity_id: str,
        season: int,
        dimension: SplitDimension,
        rows: Iterable[SplitRow],
        *,
        with_woba: bool = False,
    ) -> Result[SplitResult, SaberError]:
        def run() -> SplitResult:
            constants = (
                self.constants_provider.lookup(season, fallback=self._constants_fallback) if with_woba else None
            )
            return self.split_engine.split(entity_id, season, dimension, rows, constants)

        return self._call("splits", run)

    def streaks(
        self,
        player_id: str,
        season: int,
        kind: StreakKind,
        games: Iterable[PlayerGameBatting] | Iterable[PlayerGamePitching],
        *,
        minimum: float = 1,
        longest_only: bool = False,
    ) -> Result[list[Streak], SaberError]:
        """Hitting streaks (``minimum`` in games) or scoreless streaks (``minimum`` in innings).

        With ``longest_only`` the result holds at most the single longest streak.
        """

        def run() -> list[Streak]:
            if kind is StreakKind.HITTING:
                batting = cast("Iterable[PlayerGameBatting]", games)
                found = self.streak_detector.hitting_streaks(player_id, season, batting, int(minimum))
            else:
                pitching = cast("Iterable[PlayerGamePitching]", games)
                found = self.streak_detector.scoreless_innings_streaks(player_id, season, pitching, minimum)
            if longest_only:
                top = longest(found)
                return [top] if top is not None else []
            return found

        return self._call("streaks", run)

    def run_differential(
        self,
        team_id: str,
        season: int,
        games: Iterable[TeamGameResult],
        windows: Sequence[int] = DEFAULT_WINDOWS,
    ) -> Result[RunDifferentialSeries, SaberError]:
        return self._call(
            "run_differential",
            lambda: self.run_differential_aggregator.series(team_id, season, games, windows),
        )
