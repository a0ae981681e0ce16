"""Rate-stat helpers shared by the derivation engines and split aggregation."""

from dataclasses import dataclass

from sabermetric_engine.domain.batting_stats import BattingLine
from sabermetric_engine.domain.constants import WOBAConstant


def safe_div(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for a zero denominator."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


@dataclass(frozen=True)
class SlashLine:
    avg: float
    obp: float
    slg: float
    ops: float
    iso: float


def slash_line(line: BattingLine) -> SlashLine:
    avg = safe_div(line.h, line.ab)
    obp = safe_div(line.h + line.bb + line.hbp, line.ab + line.bb + line.hbp + line.sf)
    slg = safe_div(line.total_bases, line.ab)
    return SlashLine(avg=avg, obp=obp, slg=slg, ops=obp + slg, iso=slg - avg)


def babip(line: BattingLine) -> float:
    return safe_div(line.h - line.hr, line.ab - line.so - line.hr + line.sf)


def strikeout_rate(line: BattingLine) -> float:
    return safe_div(line.so, line.pa)


def walk_rate(line: BattingLine) -> float:
    return safe_div(line.bb, line.pa)


def hr_per_fb(line: BattingLine) -> float | None:
    if line.fb is None:
        return None
    return safe_div(line.hr, line.fb)


def woba(line: BattingLine, weights: WOBAConstant) -> float:
    """Linear-weights on-base average per plate appearance.

    Intentional walks carry no weight.
    """
    numerator = (
        weights.w_bb * line.unintentional_bb
        + weights.w_hbp * line.hbp
        + weights.w_1b * line.singles
        + weights.w_2b * line.doubles
        + weights.w_3b * line.triples
        + weights.w_hr * line.hr
    )
    return safe_div(numerator, line.pa)


def per_nine(count: float, ip_outs: int) -> float:
    """Rate per nine innings, with innings tracked as outs."""
    return safe_div(27 * count, ip_outs)


def fip_core(hr: float, bb: int, hbp: int, so: int, ip_outs: int) -> float:
    """FIP before the league constant is added."""
    return safe_div(3 * (13 * hr + 3 * (bb + hbp) - 2 * so), ip_outs)
