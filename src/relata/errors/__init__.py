# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata

"""
Error handling for relata.
"""

from relata.errors.base import (
    INTERNAL,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
    RelataError,
)
from relata.errors.registry import registry

__all__ = [
    "INTERNAL",
    "ErrorCategory",
    "ErrorCode",
    "ErrorSeverity",
    "RelataError",
    "registry",
]
