"""``buildledger older TIME`` — list targets last built before a point in time.

``TIME`` is an ISO-8601 timestamp (naive values are read as UTC) or a
relative age such as ``7d``, ``12h``, ``30m`` or ``45s``, meaning that long
before now.  Combine with a future time to list every time-stamped target.
"""

from __future__ import annotations

import re
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from buildledger.cli.commands._output import print_names
from buildledger.core.file_time import FileTimeError
from buildledger.core.meta_store import StoreNotFoundError
from buildledger.core.queries import QueryValidationError, find_older_than
from buildledger.core.selection import SelectionError, parse_selector

console = Console()

_AGE_RE = re.compile(r"^(?P<amount>\d+(?:\.\d+)?)(?P<unit>[wdhms])$")
_AGE_UNITS = {
    "w": "weeks",
    "d": "days",
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
}


def parse_threshold(text: str, now: datetime | None = None) -> datetime:
    """Parse an ISO-8601 time or a relative age into an aware ``datetime``."""
    age = _AGE_RE.match(text.strip())
    if age is not None:
        now = now or datetime.now(timezone.utc)
        try:
            delta = timedelta(
                **{_AGE_UNITS[age.group("unit")]: float(age.group("amount"))}
            )
            return now - delta
        except OverflowError as exc:
            raise typer.BadParameter(f"Age {text!r} is out of range") from exc
    try:
        parsed = datetime.fromisoformat(text.strip())
    except ValueError as exc:
        raise typer.BadParameter(
            f"{text!r} is neither an ISO-8601 time nor an age like 7d or 12h"
        ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def older_cmd(
    time: str = typer.Argument(
        ...,
        help="Threshold: ISO-8601 time (UTC if no offset) or an age like 7d, 12h.",
    ),
    names: Optional[str] = typer.Option(
        None,
        "--names",
        "-n",
        help="Eligible targets, e.g. 'x,y' or 'starts_with(y_)'.",
    ),
    inclusive: bool = typer.Option(
        False,
        "--inclusive",
        "-i",
        help="Also list targets built exactly at the threshold.",
    ),
    store: Optional[Path] = typer.Option(
        None,
        "--store",
        "-s",
        help="Store directory (default: BUILDLEDGER_STORE_PATH or _targets).",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print one name per line.",
    ),
) -> None:
    """List targets whose last successful build is older than TIME."""
    threshold = parse_threshold(time)
    try:
        selection = parse_selector(names) if names is not None else None
        older = find_older_than(
            threshold, names=selection, inclusive=inclusive, store=store
        )
    except StoreNotFoundError as exc:
        console.print(f"[bold red]Store not found:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except (QueryValidationError, SelectionError) as exc:
        console.print(f"[bold red]Invalid query:[/bold red] {exc}")
        raise typer.Exit(code=1)
    except (FileTimeError, sqlite3.DatabaseError) as exc:
        console.print(f"[bold red]Store unreadable:[/bold red] {exc}")
        raise typer.Exit(code=1)

    print_names(
        console,
        older,
        title=f"Targets older than {threshold.isoformat()}",
        plain=plain,
    )
