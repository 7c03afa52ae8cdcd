"""Metadata store: per-target build records (name, last successful build time).

The metadata log must exist before it can be queried; a missing store is an
error, unlike the progress store (see ``progress_store``).
"""

from __future__ import annotations

import logging
from pathlib import Path

from buildledger.core.log_database import LogDatabase
from buildledger.core.store_paths import path_meta
from buildledger.models.records import MetaSnapshot, TargetRecord, TargetType

logger = logging.getLogger(__name__)


_CREATE_META = """
CREATE TABLE IF NOT EXISTS meta (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    name    TEXT NOT NULL,
    type    TEXT NOT NULL DEFAULT 'stem',
    parent  TEXT,
    time    TEXT,
    error   TEXT
);
"""


class StoreNotFoundError(FileNotFoundError):
    """Raised when the metadata store does not exist at the given location."""


class MetaDatabase(LogDatabase):
    """Append-only metadata log for one store directory.

    Parameters
    ----------
    store:
        The store directory (e.g. ``_targets``).
    """

    table = "meta"
    columns = ("name", "type", "parent", "time", "error")
    ddl = _CREATE_META

    def __init__(self, store: Path) -> None:
        self._store = Path(store)
        super().__init__(path_meta(self._store))

    def append(self, record: TargetRecord) -> None:
        """Append a build record.  A later row for the same name wins.

        Raises ``ValueError`` for a ``type`` outside ``TargetType``; only
        readers tolerate unlisted values.
        """
        type_ = TargetType(record.type)
        self._append_row(
            (record.name, type_.value, record.parent, record.time, record.error)
        )
        logger.debug("Appended meta row for %s to %s", record.name, self.path)

    def assert_exists(self) -> None:
        """Raise ``StoreNotFoundError`` unless the metadata log is present."""
        if not self.exists():
            raise StoreNotFoundError(
                f"No metadata store at {self.path} "
                f"(store directory: {self._store}). Has the pipeline run yet?"
            )

    def read_condensed(self) -> MetaSnapshot:
        """Read the latest record per target, in log order.

        Raises ``StoreNotFoundError`` before touching the file if the
        metadata log is absent.
        """
        self.assert_exists()
        records = [
            TargetRecord(name=name, type=type_, parent=parent, time=time, error=error)
            for name, type_, parent, time, error in self._read_condensed_rows()
        ]
        return MetaSnapshot(records=records)
