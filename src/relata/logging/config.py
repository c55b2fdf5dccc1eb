# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""Logging settings, read from ``RELATA_LOGGING_*`` environment variables."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from relata.logging.level import LogLevel


class LoggingSettings(BaseSettings):
    """How the ``relata`` logger writes records.

    Resolution only logs at DEBUG, so the default level keeps it quiet.
    """

    model_config = SettingsConfigDict(env_prefix="RELATA_LOGGING_", extra="ignore")

    level: LogLevel = LogLevel.WARNING
    json_format: bool = False
    include_timestamp: bool = True
    include_level: bool = True
    console_enabled: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, value: Any) -> LogLevel:
        if isinstance(value, LogLevel):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Log level must be a string, got {type(value).__name__}")
        return LogLevel.from_string(value)
