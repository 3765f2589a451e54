from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from covgate.model.report import GateReport, MetricRow


def _style_score(score: float, green: float, yellow: float) -> str:
    v = round(score)
    if v >= green:
        return f"[green]{v}[/green]"
    if v >= yellow:
        return f"[yellow]{v}[/yellow]"
    return f"[red]{v}[/red]"


def _fmt_threshold(value: float | None) -> str:
    if value is None:
        return "-"
    if value < 0:
        return "[dim]off[/dim]"
    return f"{value:g}%"


def _status(row: MetricRow, *, enforced: bool) -> str:
    if row.failing:
        return "[red]FAIL[/red]"
    if not enforced or row.target is None:
        return "[dim]n/a[/dim]"
    return "[green]ok[/green]"


def render_human(
    report: GateReport,
    *,
    color: bool = True,
    green: float = 80.0,
    yellow: float = 50.0,
) -> str:
    """Render a Rich table of measured coverage, thresholds and range scores."""
    result = report.result
    table = Table(title="Coverage Gate", box=box.SIMPLE_HEAVY, header_style="bold")

    table.add_column("Metric")
    table.add_column("Actual", justify="right")
    table.add_column("Minimum", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Status", justify="center")

    for row in report.rows:
        table.add_row(
            row.metric.value,
            f"{row.actual:.1f}%",
            _fmt_threshold(row.minimum),
            _fmt_threshold(row.target),
            _style_score(row.score, green, yellow),
            _status(row, enforced=result.enforced),
        )

    table.add_section()
    table.add_row(
        "[bold]Health[/bold]",
        "",
        "",
        "",
        f"[bold]{_style_score(result.health, green, yellow)}[/bold]",
        "",
    )

    if not result.enforced:
        verdict = "[dim]No coverage targets configured.[/dim]"
    elif result.passed:
        verdict = "[green]Coverage gate passed.[/green]"
    else:
        names = ", ".join(sorted(m.value for m in result.failing))
        verdict = f"[red]Coverage gate failed:[/red] {names}"

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color)
    console.print()
    console.print(table)
    console.print(verdict)
    return buf.getvalue().rstrip()


__all__ = ["render_human"]
