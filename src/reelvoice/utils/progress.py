"""Progress reporting on stderr using Rich.

Every fallback goes through ``log_fallback`` so a gap between requested and
delivered narration can be explained from the log alone.
"""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console(stderr=True)


def _stamp() -> str:
    return f"[dim]\\[{datetime.now().strftime('%H:%M:%S')}][/dim]"


def log(message: str, *, style: str = "bold") -> None:
    """Log a timestamped message."""
    console.print(f"{_stamp()} {message}", style=style, highlight=False)


def log_step(step: str, message: str) -> None:
    """Log a processing step under a short component label."""
    console.print(f"{_stamp()} [bold cyan]{step}[/bold cyan] {message}", highlight=False)


def log_success(message: str) -> None:
    log(f"[green]✓[/green] {message}", style="")


def log_warning(message: str) -> None:
    log(f"[yellow]⚠[/yellow] {message}", style="")


def log_error(message: str) -> None:
    log(f"[red]✗[/red] {message}", style="")


def log_fallback(step: str, reason: str, action: str) -> None:
    """Log a degraded path: what went wrong and what happens instead."""
    console.print(
        f"{_stamp()} [yellow]⚠[/yellow] [bold cyan]{step}[/bold cyan] "
        f"{reason} [dim]→[/dim] {action}",
        highlight=False,
    )


def seconds(value: float | None) -> str:
    """Render a duration that may be unknown."""
    return "unknown" if value is None else f"{value:.2f}s"


def show_stage_summary(stage: str, duration_seconds: float, details: dict) -> None:
    """Show a summary panel for a completed run."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    for key, value in details.items():
        table.add_row(key, str(value))

    table.add_row("Elapsed", f"{duration_seconds:.1f}s")

    console.print(Panel(table, title=f"[bold]{stage} Complete[/bold]", border_style="green"))
