"""
cpln-provider - UI Components
Standardized headers and plan rendering
"""

from typing import List

from rich.console import Console
from rich.table import Table

from cpln_provider.models.results import Diagnostics, PlanAction, PlannedChange

BRAND = "cpln"

ACTION_STYLES = {
    PlanAction.CREATE: ("+", "green"),
    PlanAction.UPDATE: ("~", "yellow"),
    PlanAction.REPLACE: ("-/+", "magenta"),
    PlanAction.DELETE: ("-", "red"),
    PlanAction.NO_OP: (" ", "dim"),
}


def show_header(
    title: str,
    subtitle: str = None,
    org: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Plan", "Apply")
        subtitle: Optional subtitle line
        org: Control-plane org (if applicable)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)
    """
    if console is None:
        console = Console()

    console.print(
        f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] [bold white]{title}[/bold white]"
    )

    if subtitle:
        console.print(
            f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] [dim]{subtitle}[/dim]"
        )

    if org:
        console.print(
            f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] Org: [cyan]{org}[/cyan]"
        )

    if details:
        for key, value in details.items():
            console.print(
                f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] {key}: [cyan]{value}[/cyan]"
            )

    console.print()


def render_plan(changes: List[PlannedChange], console: Console) -> None:
    """Print planned changes as a table followed by a summary line."""
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("", width=3)
    table.add_column("Address")
    table.add_column("Action")
    table.add_column("Changed fields", style="dim")

    for change in changes:
        symbol, style = ACTION_STYLES[change.action]
        table.add_row(
            f"[{style}]{symbol}[/{style}]",
            change.address,
            f"[{style}]{change.action.value}[/{style}]",
            ", ".join(change.changed_fields),
        )

    console.print(table)

    counts = {action: 0 for action in PlanAction}
    for change in changes:
        counts[change.action] += 1

    console.print(
        f"\n[bold]Plan:[/bold] {counts[PlanAction.CREATE]} to add, "
        f"{counts[PlanAction.UPDATE]} to change, "
        f"{counts[PlanAction.REPLACE]} to replace, "
        f"{counts[PlanAction.DELETE]} to destroy.\n"
    )


def render_diagnostics(diags: Diagnostics, console: Console) -> None:
    for diag in diags:
        if diag.is_error:
            console.print(f"[bold red]✗ Error:[/bold red] {diag}")
        else:
            console.print(f"[yellow]⚠ Warning:[/yellow] {diag}")
