"""Typed failures raised by the derivation engine.

Every engine failure derives from ``SaberError`` so callers can catch the whole
family at a service boundary. Legitimate zero-denominator cases (a player with
no at-bats, a pitcher with no outs recorded) are not errors; they produce
sentinel zero or ``None`` fields on the derived record instead.
"""


class SaberError(Exception):
    """Base class for all engine failures."""


class ConstantsUnavailable(SaberError):
    def __init__(self, season: int, league: str | None = None) -> None:
        self.season = season
        self.league = league
        where = f"season {season}" if league is None else f"season {season}, league {league}"
        super().__init__(f"No wOBA/league constants available for {where}")


class InsufficientSample(SaberError):
    def __init__(self, message: str, *, games_sampled: int = 0) -> None:
        self.games_sampled = games_sampled
        super().__init__(message)


class StateNotFound(SaberError):
    def __init__(self, message: str, *, runners_code: str | None = None) -> None:
        self.runners_code = runners_code
        super().__init__(message)


class MalformedEventSequence(SaberError):
    def __init__(self, message: str, *, game_id: str | None = None, event_index: int | None = None) -> None:
        self.game_id = game_id
        self.event_index = event_index
        prefix = f"game {game_id}, event {event_index}: " if game_id is not None else ""
        super().__init__(f"{prefix}{message}")


class InvalidContext(SaberError):
    """Raised when a caller-supplied context or filter is internally inconsistent."""


class InvalidSnapshot(SaberError):
    """Raised when a counting-stat snapshot violates its invariants."""


class ConfigError(SaberError):
    def __init__(self, message: str, *, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)
