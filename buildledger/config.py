"""Store configuration — env-driven.

Reads from a .env file and BUILDLEDGER_* environment variables. Queries
build a fresh ``StoreSettings()`` only when no store is passed explicitly,
so the location is always a value threaded into the call rather than
mutable global state.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Store location and logging settings.

    Examples
    --------
    Override via environment::

        export BUILDLEDGER_STORE_PATH=/data/pipeline/_targets
        export BUILDLEDGER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDLEDGER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    store_path: Path = Path("_targets")
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {value!r}")
        return level

