"""Read-only queries over the metadata and progress stores.

- ``find_older_than``: targets whose last successful build is before a time.
- ``find_errored`` (and ``find_progress``): targets by latest progress status.

Every call re-reads the store; nothing is cached between calls.

Ordering differs between the two families on purpose:

- ``find_older_than`` filters by *membership* in the selection and returns
  names in store order.
- ``find_progress`` with an explicit selection looks each selected name up
  in the snapshot and returns names in *selection* order.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from buildledger.config import StoreSettings
from buildledger.core.file_time import decode_file_time
from buildledger.core.meta_store import MetaDatabase
from buildledger.core.progress_store import ProgressDatabase
from buildledger.core.selection import (
    Explicit,
    NameSelection,
    Unrestricted,
    resolve_names,
)
from buildledger.models.records import ProgressRecord, ProgressStatus

logger = logging.getLogger(__name__)


class QueryValidationError(ValueError):
    """Raised for malformed query arguments, before any store is read."""


def _resolve_store(store: Path | str | None) -> Path:
    if store is None:
        return StoreSettings().store_path
    return Path(store)


# ---------------------------------------------------------------------------
# Time threshold
# ---------------------------------------------------------------------------


def find_older_than(
    threshold: datetime,
    names: NameSelection = None,
    inclusive: bool = False,
    store: Path | str | None = None,
) -> list[str]:
    """List targets whose last successful build happened before *threshold*.

    Only targets with a recorded time stamp can qualify.  Pass a future
    *threshold* to select every time-stamped target, e.g. to force a full
    rerun.

    Parameters
    ----------
    threshold:
        A single timezone-aware ``datetime``.
    names:
        Optional selection of eligible targets.  ``None`` makes every target
        eligible; targets excluded by the selection are never returned.
    inclusive:
        Whether a target built exactly at *threshold* counts as older.
    store:
        Store directory.  Defaults to ``StoreSettings().store_path``.

    Returns
    -------
    list[str]
        Matching names in store order.

    Raises
    ------
    QueryValidationError
        If *threshold* or *inclusive* is malformed.
    StoreNotFoundError
        If the metadata store does not exist.
    """
    if not isinstance(threshold, datetime):
        raise QueryValidationError(
            f"threshold must be a single datetime, got {type(threshold).__name__}"
        )
    if threshold.tzinfo is None or threshold.utcoffset() is None:
        raise QueryValidationError(
            f"threshold must be timezone-aware, got naive {threshold.isoformat()!r}"
        )
    if not isinstance(inclusive, bool):
        raise QueryValidationError(
            f"inclusive must be a single bool, got {type(inclusive).__name__}"
        )

    snapshot = MetaDatabase(_resolve_store(store)).read_condensed()
    restriction = resolve_names(names, snapshot.names)
    eligible = (
        None if isinstance(restriction, Unrestricted) else set(restriction.names)
    )

    older: list[str] = []
    for record in snapshot.records:
        if record.time is None:
            continue
        if eligible is not None and record.name not in eligible:
            continue
        built_at = decode_file_time(record.time)
        if built_at < threshold or (inclusive and built_at == threshold):
            older.append(record.name)

    logger.info(
        "find_older_than threshold=%s inclusive=%s: %d of %d targets",
        threshold.isoformat(), inclusive, len(older), len(snapshot),
    )
    return older


# ---------------------------------------------------------------------------
# Progress status
# ---------------------------------------------------------------------------


def find_progress(
    status: ProgressStatus | str,
    names: NameSelection = None,
    store: Path | str | None = None,
) -> list[str]:
    """List targets whose latest progress is *status*.

    A missing progress store reads as empty.  With an explicit selection
    the result follows the selection's order and selected names the store
    does not track are skipped; otherwise it follows store order.
    """
    try:
        wanted = ProgressStatus(status)
    except ValueError as exc:
        valid = ", ".join(s.value for s in ProgressStatus)
        raise QueryValidationError(
            f"Unknown progress status {status!r}; expected one of: {valid}"
        ) from exc

    snapshot = ProgressDatabase(_resolve_store(store)).read_condensed()
    restriction = resolve_names(names, snapshot.names)

    rows: list[ProgressRecord]
    if isinstance(restriction, Explicit):
        index = snapshot.by_name()
        rows = [index[name] for name in restriction.names if name in index]
    else:
        rows = list(snapshot.records)

    found = [record.name for record in rows if record.status == wanted]
    logger.info(
        "find_progress status=%s: %d of %d targets",
        wanted.value, len(found), len(snapshot),
    )
    return found


def find_errored(
    names: NameSelection = None,
    store: Path | str | None = None,
) -> list[str]:
    """List targets whose latest progress is ``errored``."""
    return find_progress(ProgressStatus.ERRORED, names=names, store=store)


def find_built(
    names: NameSelection = None,
    store: Path | str | None = None,
) -> list[str]:
    return find_progress(ProgressStatus.BUILT, names=names, store=store)


def find_canceled(
    names: NameSelection = None,
    store: Path | str | None = None,
) -> list[str]:
    return find_progress(ProgressStatus.CANCELED, names=names, store=store)


def find_skipped(
    names: NameSelection = None,
    store: Path | str | None = None,
) -> list[str]:
    return find_progress(ProgressStatus.SKIPPED, names=names, store=store)
