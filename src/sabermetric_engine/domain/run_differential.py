from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class RunDifferentialGamePoint:
    game_id: str
    game_date: date
    opponent_id: str
    home: bool
    runs_scored: int
    runs_allowed: int
    differential: int
    cumulative_diff: int


@dataclass(frozen=True)
class RunDifferentialWindowPoint:
    end_game_id: str
    end_date: date
    games_in_window: int
    runs_scored: int
    runs_allowed: int
    run_differential: int


@dataclass(frozen=True)
class RunDifferentialWindow:
    window_size: int
    label: str
    points: tuple[RunDifferentialWindowPoint, ...]


@dataclass(frozen=True)
class RunDifferentialSeries:
    entity_type: str
    entity_id: str
    season: int
    games_played: int
    runs_scored: int
    runs_allowed: int
    run_differential: int
    games: tuple[RunDifferentialGamePoint, ...]
    rolling: tuple[RunDifferentialWindow, ...] = ()

    def window(self, size: int) -> RunDifferentialWindow | None:
        return next((w for w in self.rolling if w.window_size == size), None)
