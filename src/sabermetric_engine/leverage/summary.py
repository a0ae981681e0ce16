from collections.abc import Iterable, Sequence

from sabermetric_engine.domain.plays import (
    GameWinProbabilitySummary,
    LeverageRole,
    PlateAppearanceLeverage,
    PlayerLeverageSummary,
    WinProbabilityCurve,
)

LOW_LEVERAGE_THRESHOLD = 0.85
HIGH_LEVERAGE_THRESHOLD = 2.0


def summarize_game(
    curve: WinProbabilityCurve,
    leverages: Sequence[PlateAppearanceLeverage] = (),
) -> GameWinProbabilitySummary:
    end = curve.points[-1].home_win_prob if curve.points else curve.home_win_prob_start
    positive = max(leverages, key=lambda pa: pa.we_change, default=None)
    negative = min(leverages, key=lambda pa: pa.we_change, default=None)
    return GameWinProbabilitySummary(
        game_id=curve.game_id,
        season=curve.season,
        home_win_prob_start=curve.home_win_prob_start,
        home_win_prob_end=end,
        biggest_positive_swing=positive if positive is not None and positive.we_change > 0 else None,
        biggest_negative_swing=negative if negative is not None and negative.we_change < 0 else None,
    )


def win_probability_added(pa: PlateAppearanceLeverage, role: LeverageRole) -> float:
    """WPA credited to the batter or pitcher of a plate appearance.

    ``we_change`` is from the home side, and the batting team is the away team
    in the top of an inning.
    """
    batter_wpa = -pa.we_change if pa.top_of_inning else pa.we_change
    return batter_wpa if role is LeverageRole.BATTER else -batter_wpa


def summarize_player(
    leverages: Iterable[PlateAppearanceLeverage],
    player_id: str,
    role: LeverageRole,
    *,
    low: float = LOW_LEVERAGE_THRESHOLD,
    high: float = HIGH_LEVERAGE_THRESHOLD,
) -> PlayerLeverageSummary:
    """Bucket a player's plate appearances by leverage and total their WPA.

    Leverage below ``low`` counts as low, above ``high`` as high, and anything
    in between (inclusive) as medium.
    """
    own = [
        pa
        for pa in leverages
        if (pa.batter_id if role is LeverageRole.BATTER else pa.pitcher_id) == player_id
    ]
    low_count = sum(1 for pa in own if pa.leverage_index < low)
    high_count = sum(1 for pa in own if pa.leverage_index > high)
    return PlayerLeverageSummary(
        player_id=player_id,
        role=role,
        plate_appearances=len(own),
        avg_leverage_index=sum(pa.leverage_index for pa in own) / len(own) if own else 0.0,
        low_leverage_pa=low_count,
        medium_leverage_pa=len(own) - low_count - high_count,
        high_leverage_pa=high_count,
        win_probability_added=sum(win_probability_added(pa, role) for pa in own),
    )


def high_leverage(
    leverages: Iterable[PlateAppearanceLeverage],
    min_leverage: float = HIGH_LEVERAGE_THRESHOLD,
) -> list[PlateAppearanceLeverage]:
    """Plate appearances at or above ``min_leverage``, highest first."""
    selected = [pa for pa in leverages if pa.leverage_index >= min_leverage]
    return sorted(selected, key=lambda pa: (-pa.leverage_index, pa.game_id, pa.event_index))
