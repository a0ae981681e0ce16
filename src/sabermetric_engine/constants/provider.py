import logging
from collections.abc import Iterable
from enum import StrEnum

from sabermetric_engine.domain.constants import LeagueConstant, SeasonConstants, WOBAConstant
from sabermetric_engine.exceptions import ConstantsUnavailable

logger = logging.getLogger(__name__)


class ConstantsFallback(StrEnum):
    """Caller-chosen policy when a season has no constants."""

    NONE = "none"
    NEAREST_PRIOR = "nearest_prior"


class ConstantsProvider:
    """Read-only lookup over externally supplied season/league constant tables."""

    def __init__(
        self,
        woba_constants: Iterable[WOBAConstant],
        league_constants: Iterable[LeagueConstant] = (),
    ) -> None:
        self._woba: dict[int, WOBAConstant] = {c.season: c for c in woba_constants}
        self._league: dict[tuple[int, str], LeagueConstant] = {(c.season, c.league): c for c in league_constants}

    def seasons(self) -> list[int]:
        return sorted(self._woba)

    def lookup(
        self,
        season: int,
        league: str | None = None,
        *,
        fallback: ConstantsFallback = ConstantsFallback.NONE,
    ) -> SeasonConstants:
        """Return the constants for a season and optional league.

        Raises ``ConstantsUnavailable`` when the season has no wOBA constants,
        unless the caller opts into ``NEAREST_PRIOR``, in which case the latest
        earlier season is used and recorded in ``fallback_from``.
        """
        resolved = season
        if season not in self._woba:
            if fallback is not ConstantsFallback.NEAREST_PRIOR:
                raise ConstantsUnavailable(season, league)
            prior = [s for s in self._woba if s < season]
            if not prior:
                raise ConstantsUnavailable(season, league)
            resolved = max(prior)
            logger.warning("No constants for season %d, falling back to %d", season, resolved)

        league_constant = None
        if league is not None:
            league_constant = self._league.get((resolved, league))
            if league_constant is None:
                logger.debug("No league constants for %s %d", league, resolved)

        return SeasonConstants(
            woba=self._woba[resolved],
            league=league_constant,
            fallback_from=season if resolved != season else None,
        )
