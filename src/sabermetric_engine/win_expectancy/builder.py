"""Build win-expectancy tables from historical state observations.

Each observation is a game state that occurred in a decided game together with
whether the home team went on to win. States are bucketed exactly as the model
buckets its queries, so a table built here is always addressable by
``WinExpectancyModel``.
"""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass

import pandas as pd

from sabermetric_engine.domain.game_state import (
    GameState,
    StateBucket,
    WinExpectancy,
    WinExpectancyEra,
    WinExpectancyTable,
)
from sabermetric_engine.win_expectancy.model import DEFAULT_EXTRA_INNINGS_BUCKET, DEFAULT_SCORE_DIFF_CAP

logger = logging.getLogger(__name__)

_BUCKET_COLUMNS = ["inning", "top_of_inning", "outs", "runners_code", "score_diff"]


@dataclass(frozen=True)
class StateObservation:
    state: GameState
    home_won: bool


def build_win_expectancy_table(
    observations: Iterable[StateObservation],
    era: WinExpectancyEra,
    *,
    min_sample_size: int = 1,
    score_diff_cap: int = DEFAULT_SCORE_DIFF_CAP,
    extra_innings_bucket: int = DEFAULT_EXTRA_INNINGS_BUCKET,
) -> WinExpectancyTable:
    """Average home-win outcomes per bucket, dropping buckets below ``min_sample_size``."""
    records = [
        {
            **asdict(obs.state.bucket(score_diff_cap, extra_innings_bucket)),
            "home_won": 1.0 if obs.home_won else 0.0,
        }
        for obs in observations
        if obs.state.year is None or era.contains(obs.state.year)
    ]
    if not records:
        logger.info("No observations for era %d-%d", era.start_year, era.end_year)
        return WinExpectancyTable(era=era)

    frame = pd.DataFrame.from_records(records)
    grouped = (
        frame.groupby(_BUCKET_COLUMNS, sort=True)["home_won"]
        .agg(win_probability="mean", sample_size="size")
        .reset_index()
    )
    kept = grouped[grouped["sample_size"] >= min_sample_size]

    entries: dict[StateBucket, WinExpectancy] = {}
    for row in kept.itertuples(index=False):
        bucket = StateBucket(
            inning=int(row.inning),
            top_of_inning=bool(row.top_of_inning),
            outs=int(row.outs),
            runners_code=str(row.runners_code),
            score_diff=int(row.score_diff),
        )
        entries[bucket] = WinExpectancy(
            bucket=bucket,
            home_win_probability=float(row.win_probability),
            era=era,
            sample_size=int(row.sample_size),
        )

    logger.info(
        "Built win expectancy table for %d-%d: %d of %d buckets kept (min sample %d)",
        era.start_year,
        era.end_year,
        len(entries),
        len(grouped),
        min_sample_size,
    )
    return WinExpectancyTable(era=era, entries=entries)
