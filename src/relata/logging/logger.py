# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Logger implementation for relata.

Loggers are standard library loggers configured with a structured formatter
that appends ``key=value`` context (or emits JSON) from the record's extras
and from the active :func:`log_context`.
"""

from __future__ import annotations

import contextlib
import datetime
import enum
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from relata.logging.config import LoggingSettings
from relata.logging.level import LogLevel

if TYPE_CHECKING:
    from collections.abc import Iterator

# Context variable for storing log context data
_log_context: ContextVar[dict[str, Any]] = ContextVar("relata_log_context", default={})

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Formatter that supports structured logging with context data."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(name)s %(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        extra: dict[str, Any] = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }

        context = _log_context.get()
        if context:
            extra.update(context)

        if self.json_format:
            return self._format_json(record, extra)
        message = super().format(record)
        return self._format_text(message, extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "name": record.name,
            **{k: _format_value(v) for k, v in extra.items()},
        }
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["error"] = str(record.exc_info[1])
        return json.dumps(log_data, default=str)

    def _format_text(self, message: str, extra: dict[str, Any]) -> str:
        if not extra:
            return message
        ctx_str = " ".join(f"{k}={_format_value(v)}" for k, v in extra.items())
        return f"{message} {ctx_str}"


def _format_value(value: Any) -> str:
    """Format a context value for log output."""
    if isinstance(value, str):
        if " " in value:
            return f'"{value}"'
        return value
    if isinstance(value, datetime.datetime | datetime.date):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, type):
        return value.__name__
    if isinstance(value, BaseException):
        return str(value)
    try:
        return json.dumps(value)
    except TypeError:
        return str(value)


@contextlib.contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Add context information to all log records emitted within the block."""
    token = _log_context.set({**_log_context.get(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


def configure_logger(
    logger: logging.Logger, settings: LoggingSettings | None = None
) -> logging.Logger:
    """Attach a structured console handler to ``logger`` according to settings."""
    settings = settings or LoggingSettings()
    logger.setLevel(settings.level.to_stdlib_level())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if settings.console_enabled:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(
            StructuredFormatter(
                json_format=settings.json_format,
                include_timestamp=settings.include_timestamp,
                include_level=settings.include_level,
            )
        )
        logger.addHandler(console)
        logger.propagate = False
    else:
        logger.propagate = True
    return logger


def get_logger(name: str, level: LogLevel | None = None) -> logging.Logger:
    """Get a logger for the specified name.

    The ``relata`` root logger is configured once from :class:`LoggingSettings`;
    child loggers inherit its handler.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override

    Returns:
        Configured logger instance
    """
    root = logging.getLogger("relata")
    if not getattr(root, "_relata_configured", False):
        configure_logger(root)
        root._relata_configured = True  # type: ignore[attr-defined]

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.to_stdlib_level())
    return logger
