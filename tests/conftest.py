"""Shared test fixtures for buildledger."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import closing
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from buildledger.core.log_database import LogDatabase
from buildledger.core.meta_store import MetaDatabase
from buildledger.core.progress_store import ProgressDatabase
from buildledger.models.records import ProgressRecord, ProgressStatus, TargetRecord

# Fixed reference instant for time-stamped records.
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    """Return BASE_TIME shifted by *seconds*."""
    return BASE_TIME + timedelta(seconds=seconds)


@pytest.fixture(name="at")
def at_fixture() -> Callable[[float], datetime]:
    """Provide the BASE_TIME offset helper."""
    return at


@pytest.fixture
def store(tmp_path: Path) -> Path:
    """Provide a store directory path (nothing written yet)."""
    return tmp_path / "_targets"


@pytest.fixture
def meta_db(store: Path) -> MetaDatabase:
    return MetaDatabase(store)


@pytest.fixture
def progress_db(store: Path) -> ProgressDatabase:
    return ProgressDatabase(store)


# ---------------------------------------------------------------------------
# Store writers — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def write_meta(meta_db: MetaDatabase) -> Callable[..., None]:
    """Factory fixture: append ``(name, seconds | None)`` rows to the meta store.

    ``seconds`` is an offset from BASE_TIME; ``None`` records no time stamp.
    """

    def _write(*rows: tuple[str, float | None], **overrides: Any) -> None:
        for name, seconds in rows:
            fields: dict[str, Any] = {
                "name": name,
                "time": None if seconds is None else at(seconds),
            }
            fields.update(overrides)
            meta_db.append(TargetRecord(**fields))

    return _write


@pytest.fixture
def write_progress(progress_db: ProgressDatabase) -> Callable[..., None]:
    """Factory fixture: append ``(name, status)`` rows to the progress store."""

    def _write(*rows: tuple[str, str], **overrides: Any) -> None:
        for name, status in rows:
            fields: dict[str, Any] = {"name": name, "status": ProgressStatus(status)}
            fields.update(overrides)
            progress_db.append(ProgressRecord(**fields))

    return _write


@pytest.fixture
def example_meta(write_meta: Callable[..., None], store: Path) -> Path:
    """Metadata rows x (t=100), y (t=200), z (no time stamp)."""
    write_meta(("x", 100), ("y", 200), ("z", None))
    return store


@pytest.fixture
def example_progress(write_progress: Callable[..., None], store: Path) -> Path:
    """Progress rows a=built, b=errored, c=errored, d=running."""
    write_progress(
        ("a", "built"),
        ("b", "errored"),
        ("c", "errored"),
        ("d", "running"),
    )
    return store


@pytest.fixture
def insert_raw(meta_db: MetaDatabase, progress_db: ProgressDatabase) -> Callable[..., None]:
    """Factory fixture: insert a row as an external executor would.

    Bypasses the record models, so values the enums do not list can be
    written.  ``table`` is ``"meta"`` or ``"progress"``.
    """

    def _insert(table: str, **values: Any) -> None:
        db: LogDatabase = meta_db if table == "meta" else progress_db
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with closing(db._connect()) as conn, conn:
            conn.execute(
                f"INSERT INTO {db.table} ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )

    return _insert
