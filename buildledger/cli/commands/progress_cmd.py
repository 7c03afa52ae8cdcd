"""``buildledger errored`` / ``buildledger progress STATUS``.

List targets by the outcome of their most recent execution attempt.  A
store without progress records lists nothing rather than failing.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from buildledger.cli.commands._output import print_names
from buildledger.core.queries import QueryValidationError, find_progress
from buildledger.core.selection import SelectionError, parse_selector
from buildledger.models.records import ProgressStatus

console = Console()


def _run(status: str, names: str | None, store: Path | None, plain: bool) -> None:
    try:
        selection = parse_selector(names) if names is not None else None
        found = find_progress(status, names=selection, store=store)
    except (QueryValidationError, SelectionError) as exc:
        console.print(f"[bold red]Invalid query:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except sqlite3.DatabaseError as exc:
        console.print(f"[bold red]Store unreadable:[/bold red] {exc}")
        raise typer.Exit(code=1)
    print_names(console, found, title=f"Targets with progress '{status}'", plain=plain)


def errored_cmd(
    names: Optional[str] = typer.Option(
        None,
        "--names",
        "-n",
        help="Restrict to these targets, e.g. 'x,y' or 'starts_with(y_)'.",
    ),
    store: Optional[Path] = typer.Option(
        None,
        "--store",
        "-s",
        help="Store directory (default: BUILDLEDGER_STORE_PATH or _targets).",
    ),
    plain: bool = typer.Option(False, "--plain", help="Print one name per line."),
) -> None:
    """List targets whose latest run errored."""
    _run(ProgressStatus.ERRORED.value, names, store, plain)


def progress_cmd(
    status: str = typer.Argument(
        ...,
        help=f"One of: {', '.join(s.value for s in ProgressStatus)}.",
    ),
    names: Optional[str] = typer.Option(
        None,
        "--names",
        "-n",
        help="Restrict to these targets, e.g. 'x,y' or 'starts_with(y_)'.",
    ),
    store: Optional[Path] = typer.Option(
        None,
        "--store",
        "-s",
        help="Store directory (default: BUILDLEDGER_STORE_PATH or _targets).",
    ),
    plain: bool = typer.Option(False, "--plain", help="Print one name per line."),
) -> None:
    """List targets whose latest progress is STATUS."""
    _run(status, names, store, plain)
