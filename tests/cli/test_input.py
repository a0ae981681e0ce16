import json
from datetime import date
from pathlib import Path

import pytest

from sabermetric_engine.cli._input import (
    InputError,
    batting_games_from,
    context_from,
    load_document,
    park_aggregates_from,
    pitching_line_from,
    team_games_from,
)
from sabermetric_engine.domain.context import StatProvider
from sabermetric_engine.exceptions import InvalidSnapshot


class TestLoadDocument:
    def test_object(self, tmp_path: Path) -> None:
        path = tmp_path / "in.json"
        path.write_text(json.dumps({"season": 2024}))
        assert load_document(path) == {"season": 2024}

    def test_not_an_object(self, tmp_path: Path) -> None:
        path = tmp_path / "in.json"
        path.write_text("[1, 2]")
        with pytest.raises(InputError, match="JSON object"):
            load_document(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "in.json"
        path.write_text("{")
        with pytest.raises(InputError, match="not valid JSON"):
            load_document(path)


class TestContextFrom:
    def test_defaults(self) -> None:
        context = context_from({"season": 2024})
        assert context.provider is StatProvider.INTERNAL
        assert context.league is None
        assert not context.park_neutral

    def test_fields(self) -> None:
        context = context_from({"season": 2023, "provider": "baseball_reference", "league": "NL", "park_neutral": True})
        assert (context.season, context.provider, context.league, context.park_neutral) == (
            2023,
            StatProvider.BBREF,
            "NL",
            True,
        )

    def test_unknown_provider(self) -> None:
        with pytest.raises(InputError, match="provider"):
            context_from({"season": 2024, "provider": "espn"})


class TestRows:
    def test_games_parse_dates(self) -> None:
        games = batting_games_from({"games": [{"game_id": "g1", "game_date": "2024-04-01", "pa": 4, "ab": 3, "h": 1}]})
        assert games[0].game_date == date(2024, 4, 1)

    def test_team_games(self) -> None:
        row = {"game_id": "g1", "game_date": "2024-04-01", "opponent_id": "BOS", "home": False}
        with pytest.raises(InputError, match="TeamGameResult"):
            team_games_from({"games": [row]})

    def test_missing_date(self) -> None:
        with pytest.raises(InputError, match="game_date"):
            batting_games_from({"games": [{"game_id": "g1", "pa": 4, "ab": 3, "h": 1}]})

    def test_snapshot_invariants_still_apply(self) -> None:
        with pytest.raises(InvalidSnapshot):
            pitching_line_from({"ip_outs": 3, "r": 1, "er": 2})

    def test_absent_sections_are_empty(self) -> None:
        assert park_aggregates_from({}) == []
