"""buildledger CLI — Typer-based command-line interface.

Provides the ``buildledger`` command with read-only subcommands that list
stale targets and targets by progress status.

All output uses Rich for formatted terminal display.
"""
