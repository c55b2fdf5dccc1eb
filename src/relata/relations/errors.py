# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Relation-specific error classes.

Declaration errors are raised while relation metadata is discovered for an
entity type, before any query is issued.
"""

from __future__ import annotations

from typing import Any, Final

from relata.errors.base import ErrorCategory, ErrorCode, ErrorSeverity, RelataError

RELATION = ErrorCategory.get_or_create("RELATION")
RELATION_ERROR: Final = ErrorCode.get_or_create("RELATION_ERROR", RELATION)
RELATION_DECLARATION_ERROR: Final = ErrorCode.get_or_create(
    "RELATION_DECLARATION_ERROR", RELATION
)
RELATION_MIXED_BATCH: Final = ErrorCode.get_or_create("RELATION_MIXED_BATCH", RELATION)


class RelationError(RelataError):
    """Base class for all relation-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = RELATION_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            code=code,
            severity=severity,
            context=context,
            **kwargs,
        )


class RelationDeclarationError(RelationError):
    """Raised when a relation marker is malformed or inconsistent."""

    def __init__(
        self,
        message: str,
        entity_type: type | None = None,
        field_name: str | None = None,
        code: ErrorCode = RELATION_DECLARATION_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        declaration_kwargs = kwargs.copy()
        if entity_type is not None:
            declaration_kwargs["entity_type"] = entity_type.__name__
        if field_name:
            declaration_kwargs["field_name"] = field_name

        super().__init__(
            message,
            code=code,
            severity=severity,
            context=context,
            **declaration_kwargs,
        )


class MixedEntityBatchError(RelationError):
    """Raised when a batch holds entities of more than one concrete type."""

    def __init__(
        self,
        expected: type,
        found: type,
        code: ErrorCode = RELATION_MIXED_BATCH,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            f"Entity batch mixes {expected.__name__} and {found.__name__}",
            code=code,
            severity=severity,
            context=context,
            expected_type=expected.__name__,
            found_type=found.__name__,
            **kwargs,
        )
