from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from sabermetric_engine.cli._input import (
    InputError,
    batting_games_from,
    batting_line_from,
    context_from,
    league_constants_from,
    load_document,
    park_aggregates_from,
    pitching_games_from,
    pitching_line_from,
    team_games_from,
    woba_constants_from,
)
from sabermetric_engine.cli._logging import configure_logging
from sabermetric_engine.cli._output import (
    print_batting_stats,
    print_error,
    print_pitching_stats,
    print_run_differential,
    print_streaks,
)
from sabermetric_engine.config import create_config, load_engine_settings
from sabermetric_engine.constants.provider import ConstantsFallback
from sabermetric_engine.domain.batting_stats import AdvancedBattingStats
from sabermetric_engine.domain.context import StatContext
from sabermetric_engine.domain.pitching_stats import AdvancedPitchingStats
from sabermetric_engine.domain.result import Err, Ok, Result
from sabermetric_engine.domain.streak import StreakKind
from sabermetric_engine.domain.war import PlayerWARSummary
from sabermetric_engine.exceptions import SaberError
from sabermetric_engine.run_differential.aggregator import DEFAULT_WINDOWS
from sabermetric_engine.services.container import EngineContainer

app = typer.Typer(name="saber", help="Sabermetric engine: derive advanced stats from JSON inputs")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """Sabermetric engine: derive advanced stats from JSON inputs."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_InputArg = Annotated[Path, typer.Argument(help="JSON input document", exists=True, dir_okay=False)]
_ConfigOpt = Annotated[str, typer.Option("--config", help="YAML settings file (ignored if missing)")]
_FallbackOpt = Annotated[
    bool, typer.Option("--fallback/--no-fallback", help="Use the nearest earlier season's constants when missing")
]


def _fail(error: SaberError) -> NoReturn:
    print_error(str(error))
    raise typer.Exit(code=1)


def _load(path: Path) -> dict[str, Any]:
    try:
        return load_document(path)
    except InputError as e:
        _fail(e)


def _unwrap[T](result: Result[T, SaberError]) -> T:
    match result:
        case Ok(value):
            return value
        case Err(e):
            _fail(e)


def _context(payload: dict[str, Any]) -> StatContext:
    try:
        return context_from(payload)
    except SaberError as e:
        _fail(e)


def _build_container(payload: dict[str, Any], config_path: str, fallback: bool = False) -> EngineContainer:
    try:
        settings = load_engine_settings(create_config(yaml_path=config_path))
        return EngineContainer(
            settings,
            woba_constants=woba_constants_from(payload),
            league_constants=league_constants_from(payload),
            park_aggregates=park_aggregates_from(payload),
            constants_fallback=ConstantsFallback.NEAREST_PRIOR if fallback else ConstantsFallback.NONE,
        )
    except SaberError as e:
        _fail(e)


@app.command()
def batting(
    input_file: _InputArg,
    config: _ConfigOpt = "saber.yaml",
    fallback: _FallbackOpt = False,
    war: Annotated[bool, typer.Option("--war", help="Include position-player WAR")] = False,
) -> None:
    """Derive batting stats for every player in the input document."""
    payload = _load(input_file)
    container = _build_container(payload, config, fallback)
    context = _context(payload)

    rows: list[tuple[AdvancedBattingStats, PlayerWARSummary | None]] = []
    for player in payload.get("players", []):
        try:
            line = batting_line_from(player.get("line", {}))
        except SaberError as e:
            _fail(e)
        player_id = str(player.get("player_id", ""))
        park_id, team_id = player.get("park_id"), player.get("team_id")
        stats = _unwrap(container.batting_stats(player_id, line, context, park_id=park_id, team_id=team_id))
        summary = None
        if war:
            summary = _unwrap(
                container.war_summary(
                    player_id,
                    line,
                    context,
                    position=player.get("position"),
                    games=int(player.get("games", 0)),
                    park_id=park_id,
                    team_id=team_id,
                )
            )
        rows.append((stats, summary))
    print_batting_stats(rows)


@app.command()
def pitching(
    input_file: _InputArg,
    config: _ConfigOpt = "saber.yaml",
    fallback: _FallbackOpt = False,
    war: Annotated[bool, typer.Option("--war", help="Include pitcher WAR")] = False,
) -> None:
    """Derive pitching stats for every pitcher in the input document."""
    payload = _load(input_file)
    container = _build_container(payload, config, fallback)
    context = _context(payload)

    rows: list[tuple[AdvancedPitchingStats, PlayerWARSummary | None]] = []
    for player in payload.get("players", []):
        try:
            line = pitching_line_from(player.get("line", {}))
        except SaberError as e:
            _fail(e)
        player_id = str(player.get("player_id", ""))
        park_id, team_id = player.get("park_id"), player.get("team_id")
        stats = _unwrap(container.pitching_stats(player_id, line, context, park_id=park_id, team_id=team_id))
        summary = None
        if war:
            summary = _unwrap(container.pitcher_war_summary(player_id, line, context, park_id=park_id, team_id=team_id))
        rows.append((stats, summary))
    print_pitching_stats(rows)


@app.command()
def streaks(
    input_file: _InputArg,
    kind: Annotated[StreakKind, typer.Option("--kind", help="Streak kind")] = StreakKind.HITTING,
    minimum: Annotated[float, typer.Option("--min", help="Minimum length (games, or innings when scoreless)")] = 1,
    longest_only: Annotated[bool, typer.Option("--longest", help="Show only the single longest streak")] = False,
    config: _ConfigOpt = "saber.yaml",
) -> None:
    """List a player's streaks, longest first."""
    payload = _load(input_file)
    container = _build_container(payload, config)
    player_id = str(payload.get("player_id", ""))
    season = int(payload.get("season", 0))
    try:
        games = batting_games_from(payload) if kind is StreakKind.HITTING else pitching_games_from(payload)
    except SaberError as e:
        _fail(e)

    found = _unwrap(container.streaks(player_id, season, kind, games, minimum=minimum, longest_only=longest_only))
    print_streaks(player_id, found)


@app.command("run-differential")
def run_differential(
    input_file: _InputArg,
    window: Annotated[list[int] | None, typer.Option("--window", help="Trailing window size (repeatable)")] = None,
    config: _ConfigOpt = "saber.yaml",
) -> None:
    """Season run differential with trailing-window sums."""
    payload = _load(input_file)
    container = _build_container(payload, config)
    try:
        games = team_games_from(payload)
    except SaberError as e:
        _fail(e)

    windows = tuple(window) if window else DEFAULT_WINDOWS
    match container.run_differential(str(payload.get("team_id", "")), int(payload.get("season", 0)), games, windows):
        case Ok(series):
            print_run_differential(series)
        case Err(e):
            _fail(e)
