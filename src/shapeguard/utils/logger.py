"""
Rich output for shapeguard debug mode.

Renders validation failures as a table inside a panel so a long list of
errors from nested data stays readable in a terminal.
"""

from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from shapeguard.errors import ValidationError

# Shared console instance
console = Console()


def render_errors(errors: Sequence[ValidationError], title: Optional[str] = None) -> Panel:
    """
    Build a panel listing errors as path / code / message rows.

    Args:
        errors: The validation errors to show.
        title: Optional schema title for the panel header.
    """
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("Path", style="cyan")
    table.add_column("Code", style="magenta")
    table.add_column("Message")

    for error in errors:
        path = ".".join(str(p) for p in error.path) or "(root)"
        table.add_row(path, error.code, error.message)

    heading = f"Validation failed: {len(errors)} error(s)"
    if title:
        heading = f"{title} - {heading}"
    return Panel(
        table,
        title=f"[bold red]{heading}[/bold red]",
        border_style="red",
        padding=(0, 1),
    )


def log_errors(
    errors: Sequence[ValidationError],
    title: Optional[str] = None,
    target: Optional[Console] = None,
) -> None:
    """Print a panel of validation errors."""
    (target or console).print(render_errors(errors, title))


def log_success(message: str, target: Optional[Console] = None) -> None:
    (target or console).print(f"[bold green][OK][/bold green] {message}")
