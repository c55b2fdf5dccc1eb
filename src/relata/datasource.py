# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Active datasource indicator.

The indicator names the backing store that subsequent queries target. It is a
context variable, so each thread and each asyncio task sees its own value.
"""

from __future__ import annotations

import contextlib
import contextvars
from collections.abc import Iterator
from typing import Any, Final

from relata.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, RelataError

DATASOURCE = ErrorCategory.get_or_create("DATASOURCE")
DATASOURCE_NOT_FOUND: Final = ErrorCode.get_or_create("DATASOURCE_NOT_FOUND", DATASOURCE)

_active_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "relata_datasource", default=None
)


class DataSourceNotFoundError(RelataError):
    """Raised when the active datasource key names no configured datasource."""

    def __init__(
        self,
        key: str,
        code: ErrorCode = DATASOURCE_NOT_FOUND,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"No datasource configured for key '{key}'",
            code=code,
            severity=severity,
            context=context,
            datasource=key,
            **kwargs,
        )


class DataSourceKey:
    """Accessors for the active datasource key."""

    @staticmethod
    def get() -> str | None:
        return _active_key.get()

    @staticmethod
    def use(key: str | None) -> None:
        _active_key.set(key)

    @staticmethod
    def clear() -> None:
        _active_key.set(None)

    @staticmethod
    @contextlib.contextmanager
    def using(key: str) -> Iterator[str]:
        """Make ``key`` active for the block, then restore the previous key."""
        token = _active_key.set(key)
        try:
            yield key
        finally:
            _active_key.reset(token)

    @staticmethod
    @contextlib.contextmanager
    def preserved() -> Iterator[str | None]:
        """Restore whatever key is active now when the block exits."""
        current = _active_key.get()
        try:
            yield current
        finally:
            _active_key.set(current)
