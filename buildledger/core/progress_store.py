"""Progress store: per-target outcome of the most recent execution attempt.

Progress tracking initializes lazily, so an absent progress log reads as an
empty snapshot rather than an error.
"""

from __future__ import annotations

import logging
from pathlib import Path

from buildledger.core.log_database import LogDatabase
from buildledger.core.store_paths import path_progress
from buildledger.models.records import (
    ProgressRecord,
    ProgressSnapshot,
    ProgressStatus,
    TargetType,
)

logger = logging.getLogger(__name__)


_CREATE_PROGRESS = """
CREATE TABLE IF NOT EXISTS progress (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    name    TEXT NOT NULL,
    type    TEXT NOT NULL DEFAULT 'stem',
    parent  TEXT,
    status  TEXT NOT NULL
);
"""


class ProgressDatabase(LogDatabase):
    """Append-only progress log for one store directory."""

    table = "progress"
    columns = ("name", "type", "parent", "status")
    ddl = _CREATE_PROGRESS

    def __init__(self, store: Path) -> None:
        super().__init__(path_progress(Path(store)))

    def append(self, record: ProgressRecord) -> None:
        """Append a progress row.  A later row for the same name wins.

        Raises ``ValueError`` for a ``status`` or ``type`` outside the
        known enums; only readers tolerate unlisted values.
        """
        status = ProgressStatus(record.status)
        type_ = TargetType(record.type)
        self._append_row((record.name, type_.value, record.parent, status.value))
        logger.debug(
            "Appended progress row %s=%s to %s", record.name, status.value, self.path
        )

    def read_condensed(self) -> ProgressSnapshot:
        if not self.exists():
            logger.debug("No progress store at %s; reading as empty", self.path)
            return ProgressSnapshot()
        records = [
            ProgressRecord(name=name, type=type_, parent=parent, status=status)
            for name, type_, parent, status in self._read_condensed_rows()
        ]
        return ProgressSnapshot(records=records)
