import calendar
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from sabermetric_engine.derivation.rates import slash_line, woba
from sabermetric_engine.domain.batting_stats import BattingLine
from sabermetric_engine.domain.constants import SeasonConstants
from sabermetric_engine.domain.game_logs import SplitRow
from sabermetric_engine.domain.split import SplitDimension, SplitEntityType, SplitGroup, SplitResult

logger = logging.getLogger(__name__)

_HANDS = {"L", "R", "S"}


@dataclass(frozen=True)
class _GroupKey:
    key: str
    label: str
    meta: dict[str, str] = field(default_factory=dict)


def _home_away(row: SplitRow) -> _GroupKey | None:
    return _GroupKey("home", "Home") if row.home else _GroupKey("away", "Away")


def _batter_hand(row: SplitRow) -> _GroupKey | None:
    hand = (row.batter_hand or "").upper()
    if hand not in _HANDS:
        return None
    return _GroupKey(f"as_{hand}HB", f"As {hand}HB", {"hand": hand})


def _pitcher_hand(row: SplitRow) -> _GroupKey | None:
    hand = (row.pitcher_hand or "").upper()
    if hand not in {"L", "R"}:
        return None
    return _GroupKey(f"vs_{hand}HP", f"vs {hand}HP", {"hand": hand})


def _month(row: SplitRow) -> _GroupKey | None:
    month = row.game_date.month
    return _GroupKey(f"{month:02d}", calendar.month_name[month], {"month": str(month)})


def _batting_order(row: SplitRow) -> _GroupKey | None:
    if row.batting_order is None or not 1 <= row.batting_order <= 9:
        return None
    return _GroupKey(str(row.batting_order), f"Batting #{row.batting_order}", {"slot": str(row.batting_order)})


_KEY_FUNCTIONS: dict[SplitDimension, Callable[[SplitRow], _GroupKey | None]] = {
    SplitDimension.HOME_AWAY: _home_away,
    SplitDimension.BATTER_HANDED: _batter_hand,
    SplitDimension.PITCHER_HANDED: _pitcher_hand,
    SplitDimension.MONTH: _month,
    SplitDimension.BATTING_ORDER: _batting_order,
}


def _build_group(group: _GroupKey, line: BattingLine, games: int, constants: SeasonConstants | None) -> SplitGroup:
    slash = slash_line(line)
    return SplitGroup(
        key=group.key,
        label=group.label,
        games=games,
        pa=line.pa,
        ab=line.ab,
        h=line.h,
        hr=line.hr,
        bb=line.bb,
        so=line.so,
        avg=slash.avg,
        obp=slash.obp,
        slg=slash.slg,
        ops=slash.ops,
        woba=woba(line, constants.woba) if constants is not None else None,
        meta=group.meta,
    )


class SplitEngine:
    """Groups counting rows by one split dimension and recomputes rates per group."""

    def split(
        self,
        entity_id: str,
        season: int,
        dimension: SplitDimension,
        rows: Iterable[SplitRow],
        constants: SeasonConstants | None = None,
        *,
        entity_type: SplitEntityType = SplitEntityType.PLAYER,
    ) -> SplitResult:
        """Split ``rows`` along ``dimension``.

        Groups appear in the order their key is first seen in the feed. Rows
        missing the dimension's key (e.g. unknown handedness) are skipped.
        """
        key_of = _KEY_FUNCTIONS[dimension]
        keys: dict[str, _GroupKey] = {}
        lines: dict[str, BattingLine] = {}
        games: dict[str, set[str]] = {}
        skipped = 0

        for row in rows:
            group = key_of(row)
            if group is None:
                skipped += 1
                continue
            if group.key not in keys:
                keys[group.key] = group
                lines[group.key] = BattingLine()
                games[group.key] = set()
            lines[group.key] = lines[group.key] + row.line
            games[group.key].add(row.game_id)

        if skipped:
            logger.debug("Skipped %d rows without a %s key for %s", skipped, dimension, entity_id)

        return SplitResult(
            entity_type=entity_type,
            entity_id=entity_id,
            season=season,
            dimension=dimension,
            groups=tuple(_build_group(keys[k], lines[k], len(games[k]), constants) for k in keys),
        )
