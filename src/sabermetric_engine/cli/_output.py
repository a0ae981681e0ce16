from rich.console import Console
from rich.table import Table

from sabermetric_engine.domain.batting_stats import AdvancedBattingStats
from sabermetric_engine.domain.pitching_stats import AdvancedPitchingStats
from sabermetric_engine.domain.run_differential import RunDifferentialSeries
from sabermetric_engine.domain.streak import Streak, StreakKind
from sabermetric_engine.domain.war import PlayerWARSummary

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def _rate(value: float) -> str:
    return f"{value:.3f}".removeprefix("0") if 0 <= value < 1 else f"{value:.3f}"


def _optional(value: float | None, fmt: str = ".0f") -> str:
    return "—" if value is None else format(value, fmt)


def print_batting_stats(rows: list[tuple[AdvancedBattingStats, PlayerWARSummary | None]]) -> None:
    if not rows:
        console.print("No batters in input.")
        return
    season = rows[0][0].context.season
    table = Table(title=f"Batting — {season}" if season else "Batting")
    table.add_column("Player")
    table.add_column("PA", justify="right")
    table.add_column("AVG", justify="right")
    table.add_column("OBP", justify="right")
    table.add_column("SLG", justify="right")
    table.add_column("wOBA", justify="right")
    table.add_column("wRAA", justify="right")
    table.add_column("wRC+", justify="right")
    table.add_column("WAR", justify="right")
    for stats, war in rows:
        table.add_row(
            stats.player_id,
            str(stats.line.pa),
            _rate(stats.avg),
            _rate(stats.obp),
            _rate(stats.slg),
            _rate(stats.woba),
            f"{stats.wraa:+.1f}",
            _optional(stats.wrc_plus),
            _optional(war.war if war is not None else None, ".1f"),
        )
    console.print(table)


def print_pitching_stats(rows: list[tuple[AdvancedPitchingStats, PlayerWARSummary | None]]) -> None:
    if not rows:
        console.print("No pitchers in input.")
        return
    season = rows[0][0].context.season
    table = Table(title=f"Pitching — {season}" if season else "Pitching")
    table.add_column("Player")
    table.add_column("IP", justify="right")
    table.add_column("ERA", justify="right")
    table.add_column("WHIP", justify="right")
    table.add_column("K/9", justify="right")
    table.add_column("FIP", justify="right")
    table.add_column("xFIP", justify="right")
    table.add_column("ERA+", justify="right")
    table.add_column("FIP-", justify="right")
    table.add_column("WAR", justify="right")
    for stats, war in rows:
        outs = stats.line.ip_outs
        table.add_row(
            stats.player_id,
            f"{outs // 3}.{outs % 3}",
            f"{stats.era:.2f}",
            f"{stats.whip:.2f}",
            f"{stats.k_per_9:.1f}",
            f"{stats.fip:.2f}",
            _optional(stats.xfip, ".2f"),
            _optional(stats.era_plus),
            _optional(stats.fip_minus),
            _optional(war.war if war is not None else None, ".1f"),
        )
    console.print(table)


def print_streaks(player_id: str, streaks: list[Streak]) -> None:
    if not streaks:
        console.print(f"No streaks found for [bold]{player_id}[/bold].")
        return
    table = Table(title=f"Streaks — {player_id}")
    table.add_column("#", justify="right")
    table.add_column("Streak")
    table.add_column("Length", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Games", justify="right")
    for rank, streak in enumerate(streaks, start=1):
        length = streak.innings if streak.kind is StreakKind.SCORELESS_INNINGS else str(streak.length)
        table.add_row(
            str(rank),
            streak.label,
            length or "",
            streak.start_date.isoformat(),
            streak.end_date.isoformat(),
            str(len({p.game_id for p in streak.timeline})),
        )
    console.print(table)


def print_run_differential(series: RunDifferentialSeries) -> None:
    color = "green" if series.run_differential >= 0 else "red"
    console.print(
        f"[bold]{series.entity_id}[/bold] {series.season}: {series.games_played} games, "
        f"{series.runs_scored} RS, {series.runs_allowed} RA, "
        f"[{color}]{series.run_differential:+d}[/{color}]"
    )
    for window in series.rolling:
        if not window.points:
            console.print(f"  {window.label}: fewer than {window.window_size} games")
            continue
        latest = window.points[-1]
        best = max(window.points, key=lambda p: p.run_differential)
        worst = min(window.points, key=lambda p: p.run_differential)
        console.print(
            f"  {window.label}: latest {latest.run_differential:+d}, "
            f"best {best.run_differential:+d} (through {best.end_date.isoformat()}), "
            f"worst {worst.run_differential:+d} (through {worst.end_date.isoformat()})"
        )
