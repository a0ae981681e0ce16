"""JSON input decoding for the CLI commands."""

import json
from datetime import date
from pathlib import Path
from typing import Any

from sabermetric_engine.domain.batting_stats import BattingLine
from sabermetric_engine.domain.constants import LeagueConstant, WOBAConstant
from sabermetric_engine.domain.context import StatContext, StatProvider
from sabermetric_engine.domain.game_logs import PlayerGameBatting, PlayerGamePitching, TeamGameResult
from sabermetric_engine.domain.park_factor import ParkSeasonAggregate
from sabermetric_engine.domain.pitching_stats import PitchingLine
from sabermetric_engine.exceptions import SaberError


class InputError(SaberError):
    """Raised when an input document is missing fields or is not valid JSON."""


def load_document(path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise InputError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise InputError(f"{path} must contain a JSON object")
    return payload


def _build[T](kind: type[T], row: dict[str, Any]) -> T:
    try:
        return kind(**row)
    except TypeError as e:
        raise InputError(f"Invalid {kind.__name__} row {row!r}: {e}") from e


def _with_date(row: dict[str, Any]) -> dict[str, Any]:
    try:
        return {**row, "game_date": date.fromisoformat(str(row.get("game_date", "")))}
    except ValueError as e:
        raise InputError(f"Invalid game_date in row {row!r}") from e


def context_from(payload: dict[str, Any]) -> StatContext:
    try:
        provider = StatProvider(payload.get("provider", StatProvider.INTERNAL))
    except ValueError as e:
        raise InputError(f"Unknown provider {payload.get('provider')!r}") from e
    return StatContext(
        season=int(payload.get("season", 0)),
        provider=provider,
        league=payload.get("league"),
        park_neutral=bool(payload.get("park_neutral", False)),
    )


def woba_constants_from(payload: dict[str, Any]) -> list[WOBAConstant]:
    return [_build(WOBAConstant, row) for row in payload.get("woba_constants", [])]


def league_constants_from(payload: dict[str, Any]) -> list[LeagueConstant]:
    return [_build(LeagueConstant, row) for row in payload.get("league_constants", [])]


def park_aggregates_from(payload: dict[str, Any]) -> list[ParkSeasonAggregate]:
    return [_build(ParkSeasonAggregate, row) for row in payload.get("park_aggregates", [])]


def batting_line_from(row: dict[str, Any]) -> BattingLine:
    return _build(BattingLine, row)


def pitching_line_from(row: dict[str, Any]) -> PitchingLine:
    return _build(PitchingLine, row)


def batting_games_from(payload: dict[str, Any]) -> list[PlayerGameBatting]:
    return [_build(PlayerGameBatting, _with_date(row)) for row in payload.get("games", [])]


def pitching_games_from(payload: dict[str, Any]) -> list[PlayerGamePitching]:
    return [_build(PlayerGamePitching, _with_date(row)) for row in payload.get("games", [])]


def team_games_from(payload: dict[str, Any]) -> list[TeamGameResult]:
    return [_build(TeamGameResult, _with_date(row)) for row in payload.get("games", [])]
