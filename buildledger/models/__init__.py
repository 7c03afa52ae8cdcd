"""buildledger data models — all Pydantic v2, all frozen (immutable)."""

from buildledger.models.records import (
    MetaSnapshot,
    ProgressRecord,
    ProgressSnapshot,
    ProgressStatus,
    TargetRecord,
    TargetType,
)

__all__ = [
    # records
    "TargetType",
    "TargetRecord",
    "ProgressStatus",
    "ProgressRecord",
    # snapshots
    "MetaSnapshot",
    "ProgressSnapshot",
]
