"""Target metadata and progress records, plus their condensed snapshots.

Both stores are append-only logs written by the pipeline executor. A
*condensed* snapshot keeps only the most recently appended row for each
target name, in the order those surviving rows appear in the log.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from buildledger.core.file_time import encode_file_time


class TargetType(str, Enum):
    """Kind of target a record describes."""

    STEM = "stem"
    PATTERN = "pattern"
    BRANCH = "branch"


class ProgressStatus(str, Enum):
    """Outcome of the most recent execution attempt of a target."""

    DISPATCHED = "dispatched"
    STARTED = "started"
    RUNNING = "running"
    BUILT = "built"
    ERRORED = "errored"
    CANCELED = "canceled"
    SKIPPED = "skipped"


class TargetRecord(BaseModel):
    """One row of the metadata store.

    ``time`` holds the stored file-time string (``t<days>s``) of the last
    successful build, or ``None`` when the target has no recorded time
    stamp. A ``datetime`` may be passed and is encoded on construction.

    ``type`` is a ``TargetType`` when the value is known and the raw string
    otherwise; the executor may record kinds this layer does not list.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: TargetType | str = Field(default=TargetType.STEM, union_mode="left_to_right")
    parent: str | None = None  # pattern name, for dynamic branches
    time: str | None = None
    error: str | None = None

    @field_validator("time", mode="before")
    @classmethod
    def _encode_instant(cls, value: object) -> object:
        if isinstance(value, datetime):
            return encode_file_time(value)
        return value


class ProgressRecord(BaseModel):
    """One row of the progress store.

    Unlisted ``status`` and ``type`` values are kept as plain strings.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    status: ProgressStatus | str = Field(union_mode="left_to_right")
    type: TargetType | str = Field(default=TargetType.STEM, union_mode="left_to_right")
    parent: str | None = None


class MetaSnapshot(BaseModel):
    """Condensed, point-in-time view of the metadata store."""

    model_config = ConfigDict(frozen=True)

    records: list[TargetRecord] = []

    @property
    def names(self) -> tuple[str, ...]:
        """Target names in row order."""
        return tuple(record.name for record in self.records)

    def __len__(self) -> int:
        return len(self.records)


class ProgressSnapshot(BaseModel):
    """Condensed, point-in-time view of the progress store."""

    model_config = ConfigDict(frozen=True)

    records: list[ProgressRecord] = []

    @property
    def names(self) -> tuple[str, ...]:
        """Target names in row order."""
        return tuple(record.name for record in self.records)

    def by_name(self) -> dict[str, ProgressRecord]:
        """Index the records by target name."""
        return {record.name: record for record in self.records}

    def __len__(self) -> int:
        return len(self.records)
