"""Main Typer application — imports and registers all CLI commands.

Entry point: ``buildledger`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer

from buildledger.cli.commands.older_cmd import older_cmd
from buildledger.cli.commands.progress_cmd import errored_cmd, progress_cmd
from buildledger.config import StoreSettings

app = typer.Typer(
    name="buildledger",
    help="buildledger: query target build metadata and progress.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="older", help="List targets last built before a time.")(older_cmd)
app.command(name="errored", help="List targets whose latest run errored.")(errored_cmd)
app.command(name="progress", help="List targets by latest progress status.")(progress_cmd)


@app.callback()
def _configure_logging() -> None:
    # Level comes from BUILDLEDGER_LOG_LEVEL
    logging.basicConfig(
        level=StoreSettings().log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
