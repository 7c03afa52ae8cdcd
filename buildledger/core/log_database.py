"""Append-only SQLite log shared by the metadata and progress stores.

Design:
- Append-only: the executor calls ``append()``; there is no update or delete.
- Insertion order is the autoincrement ``id``.
- Condensed reads keep the latest row per ``name``, ordered by that row's id.
- Readers open the file read-only and never create it.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from contextlib import closing
from pathlib import Path
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


class LogDatabase:
    """Base class for a single-table, append-only SQLite log.

    Subclasses set ``table``, ``columns`` (excluding ``id``) and ``ddl``.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  It is created lazily on the
        first ``_append_row()``.
    """

    table: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    ddl: ClassVar[str]

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    def exists(self) -> bool:
        """Whether the database file is present on disk."""
        return self._db_path.is_file()

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path))
        conn.execute(self.ddl)
        conn.execute(
            f"CREATE INDEX IF NOT EXISTS idx_{self.table}_name "
            f"ON {self.table}(name, id)"
        )
        return conn

    def _connect_readonly(self) -> sqlite3.Connection:
        uri = f"{self._db_path.resolve().as_uri()}?mode=ro"
        return sqlite3.connect(uri, uri=True)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def _append_row(self, values: Sequence[Any]) -> None:
        placeholders = ", ".join("?" for _ in self.columns)
        with closing(self._connect()) as conn, conn:
            conn.execute(
                f"INSERT INTO {self.table} ({', '.join(self.columns)}) "
                f"VALUES ({placeholders})",
                tuple(values),
            )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _read_condensed_rows(self) -> list[tuple[Any, ...]]:
        """Return the latest row per name, in log order.

        A database file without the table yet is read as empty.
        """
        conn = self._connect_readonly()
        try:
            has_table = conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
                (self.table,),
            ).fetchone()
            if not has_table:
                return []
            rows = conn.execute(
                f"SELECT {', '.join(self.columns)} FROM {self.table} "
                f"WHERE id IN (SELECT MAX(id) FROM {self.table} GROUP BY name) "
                f"ORDER BY id ASC"
            ).fetchall()
        finally:
            conn.close()
        logger.debug("Read %d condensed rows from %s", len(rows), self._db_path)
        return rows
