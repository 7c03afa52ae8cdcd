"""Tests for record models — frozen, time stamps encoded on construction."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from buildledger.models import (
    MetaSnapshot,
    ProgressRecord,
    ProgressSnapshot,
    ProgressStatus,
    TargetRecord,
    TargetType,
)


class TestTargetRecord:
    def test_defaults(self):
        record = TargetRecord(name="x")
        assert record.time is None
        assert record.type is TargetType.STEM
        assert record.parent is None

    def test_datetime_encoded(self):
        record = TargetRecord(name="x", time=datetime(1970, 1, 2, tzinfo=timezone.utc))
        assert record.time == "t1.0s"

    def test_string_time_kept(self):
        assert TargetRecord(name="x", time="t5.0s").time == "t5.0s"

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValidationError):
            TargetRecord(name="x", time=datetime(2024, 1, 1))

    def test_known_type_becomes_enum(self):
        assert TargetRecord(name="x", type="branch").type is TargetType.BRANCH

    def test_unlisted_type_kept_as_string(self):
        assert TargetRecord(name="x", type="function").type == "function"

    def test_frozen(self):
        record = TargetRecord(name="x")
        with pytest.raises(ValidationError):
            record.name = "y"


class TestProgressRecord:
    def test_status_from_string(self):
        assert ProgressRecord(name="a", status="errored").status is ProgressStatus.ERRORED

    def test_unlisted_status_kept_as_string(self):
        record = ProgressRecord(name="a", status="completed", type="object")
        assert record.status == "completed"
        assert not isinstance(record.status, ProgressStatus)
        assert record.type == "object"

    def test_status_must_be_text(self):
        with pytest.raises(ValidationError):
            ProgressRecord(name="a", status=None)


class TestSnapshots:
    def test_names_in_row_order(self):
        snapshot = MetaSnapshot(records=[TargetRecord(name="b"), TargetRecord(name="a")])
        assert snapshot.names == ("b", "a")
        assert len(snapshot) == 2

    def test_progress_index(self):
        snapshot = ProgressSnapshot(
            records=[ProgressRecord(name="a", status=ProgressStatus.BUILT)]
        )
        assert snapshot.by_name()["a"].status is ProgressStatus.BUILT
        assert "b" not in snapshot.by_name()

    def test_empty(self):
        assert ProgressSnapshot().names == ()
        assert len(MetaSnapshot()) == 0
