"""Unit tests for the CLI — Typer command registration and query output."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from buildledger.cli.app import app
from buildledger.cli.commands.older_cmd import parse_threshold
from buildledger.core.store_paths import path_meta, path_progress

runner = CliRunner()


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("older", "errored", "progress"):
            assert command in result.output

    @pytest.mark.parametrize("command", ["older", "errored", "progress"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: threshold parsing
# ---------------------------------------------------------------------------


class TestParseThreshold:
    NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        ("text", "delta"),
        [
            ("7d", timedelta(days=7)),
            ("2w", timedelta(weeks=2)),
            ("12h", timedelta(hours=12)),
            ("30m", timedelta(minutes=30)),
            ("1.5s", timedelta(seconds=1.5)),
        ],
    )
    def test_relative_age(self, text, delta):
        assert parse_threshold(text, now=self.NOW) == self.NOW - delta

    def test_iso_with_offset(self):
        parsed = parse_threshold("2024-01-01T09:00:00+09:00")
        assert parsed == datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)

    def test_naive_iso_is_utc(self):
        assert parse_threshold("2024-01-01T00:00:00") == datetime(
            2024, 1, 1, tzinfo=timezone.utc
        )

    def test_garbage(self):
        with pytest.raises(typer.BadParameter):
            parse_threshold("last tuesday")


# ---------------------------------------------------------------------------
# Test: query commands
# ---------------------------------------------------------------------------


class TestOlderCommand:
    def test_plain_output(self, example_meta: Path):
        result = runner.invoke(
            app, ["older", "2024-01-01T00:02:30+00:00", "--store", str(example_meta), "--plain"]
        )
        assert result.exit_code == 0
        assert result.output.split() == ["x"]

    def test_inclusive(self, example_meta: Path):
        result = runner.invoke(
            app,
            ["older", "2024-01-01T00:03:20+00:00", "-i", "-s", str(example_meta), "--plain"],
        )
        assert result.exit_code == 0
        assert result.output.split() == ["x", "y"]

    def test_names_selector(self, example_meta: Path):
        result = runner.invoke(
            app, ["older", "0s", "--names", "all_of(y)", "-s", str(example_meta), "--plain"]
        )
        assert result.exit_code == 0
        assert result.output.split() == ["y"]

    def test_table_output(self, example_meta: Path):
        result = runner.invoke(app, ["older", "0s", "-s", str(example_meta)])
        assert result.exit_code == 0
        assert "x" in result.output
        assert "y" in result.output

    def test_no_matches(self, example_meta: Path):
        result = runner.invoke(app, ["older", "2000-01-01", "-s", str(example_meta)])
        assert result.exit_code == 0
        assert "no matching targets" in result.output

    def test_missing_store(self, store: Path):
        result = runner.invoke(app, ["older", "0s", "-s", str(store)])
        assert result.exit_code == 1
        assert "Store not found" in result.output

    def test_bad_selector(self, example_meta: Path):
        result = runner.invoke(app, ["older", "0s", "-n", "nope(x)", "-s", str(example_meta)])
        assert result.exit_code == 1
        assert "Invalid query" in result.output

    def test_bad_time(self, example_meta: Path):
        result = runner.invoke(app, ["older", "soonish", "-s", str(example_meta)])
        assert result.exit_code != 0

    def test_age_out_of_range(self, example_meta: Path):
        result = runner.invoke(app, ["older", "99999999w", "-s", str(example_meta)])
        assert result.exit_code == 2
        assert not isinstance(result.exception, OverflowError)

    def test_corrupt_time_stamp(self, insert_raw, store: Path):
        insert_raw("meta", name="x", time="yesterday")
        result = runner.invoke(app, ["older", "0s", "-s", str(store)])
        assert result.exit_code == 1
        assert "Store unreadable" in result.output

    def test_not_a_database(self, store: Path):
        path_meta(store).parent.mkdir(parents=True)
        path_meta(store).write_text("not sqlite " * 100)
        result = runner.invoke(app, ["older", "0s", "-s", str(store)])
        assert result.exit_code == 1
        assert "Store unreadable" in result.output


class TestProgressCommands:
    def test_errored(self, example_progress: Path):
        result = runner.invoke(app, ["errored", "-s", str(example_progress), "--plain"])
        assert result.exit_code == 0
        assert result.output.split() == ["b", "c"]

    def test_errored_selection_order(self, example_progress: Path):
        result = runner.invoke(
            app, ["errored", "-n", "c,b", "-s", str(example_progress), "--plain"]
        )
        assert result.output.split() == ["c", "b"]

    def test_errored_without_store(self, store: Path):
        result = runner.invoke(app, ["errored", "-s", str(store), "--plain"])
        assert result.exit_code == 0
        assert result.output.strip() == ""

    def test_progress_status(self, example_progress: Path):
        result = runner.invoke(
            app, ["progress", "running", "-s", str(example_progress), "--plain"]
        )
        assert result.exit_code == 0
        assert result.output.split() == ["d"]

    def test_progress_unknown_status(self, example_progress: Path):
        result = runner.invoke(app, ["progress", "exploded", "-s", str(example_progress)])
        assert result.exit_code == 1
        assert "Unknown progress status" in result.output

    def test_errored_not_a_database(self, store: Path):
        path_progress(store).parent.mkdir(parents=True)
        path_progress(store).write_text("not sqlite " * 100)
        result = runner.invoke(app, ["errored", "-s", str(store)])
        assert result.exit_code == 1
        assert "Store unreadable" in result.output
