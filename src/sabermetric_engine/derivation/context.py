from sabermetric_engine.domain.constants import SeasonConstants
from sabermetric_engine.domain.context import StatContext
from sabermetric_engine.domain.park_factor import ParkFactor
from sabermetric_engine.exceptions import InvalidContext

NEUTRAL_PARK = 100.0


def check_context(
    context: StatContext,
    constants: SeasonConstants,
    park_factor: ParkFactor | None,
) -> None:
    """Reject context/constants/park combinations that cannot describe one line."""
    if park_factor is not None and context.park_neutral:
        raise InvalidContext("Park factor supplied for a park-neutral context")
    requested = constants.fallback_from if constants.fallback_from is not None else constants.season
    if not context.is_multi_year and requested != context.season:
        raise InvalidContext(f"Constants for season {requested} do not match context season {context.season}")
    if (
        constants.league is not None
        and context.league is not None
        and constants.league.league != context.league
    ):
        raise InvalidContext(
            f"League constants for {constants.league.league} do not match context league {context.league}"
        )


def park_runs_factor(park_factor: ParkFactor | None) -> float:
    if park_factor is None:
        return NEUTRAL_PARK
    return park_factor.preferred_runs_factor
