"""Shared Rich output for the query commands."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table


def print_names(console: Console, names: list[str], *, title: str, plain: bool) -> None:
    """Print target names as a table, or one per line when *plain*."""
    if plain:
        for name in names:
            console.print(name, markup=False, highlight=False)
        return

    if not names:
        console.print(f"[dim]{title}: no matching targets.[/dim]")
        return

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Target", style="cyan")
    for position, name in enumerate(names, start=1):
        table.add_row(str(position), name)
    console.print(table)
