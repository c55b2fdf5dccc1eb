# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata

"""
Public API for relata logging.
"""

from __future__ import annotations

from relata.logging.config import LoggingSettings
from relata.logging.level import LogLevel
from relata.logging.logger import (
    StructuredFormatter,
    configure_logger,
    get_logger,
    log_context,
)

__all__ = [
    "LogLevel",
    "LoggingSettings",
    "StructuredFormatter",
    "configure_logger",
    "get_logger",
    "log_context",
]
