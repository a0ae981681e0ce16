"""Service facade over the derivation engines."""

from sabermetric_engine.services.container import EngineContainer

__all__ = ["EngineContainer"]
