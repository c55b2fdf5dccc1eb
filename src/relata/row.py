# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""Generic result row with case-insensitive column lookup."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class Row(dict[str, Any]):
    """A column -> value mapping whose ``get`` ignores column name case."""

    def get(self, column: str, default: Any = None) -> Any:
        if column in self:
            return self[column]
        folded = column.casefold()
        for key, value in self.items():
            if key.casefold() == folded:
                return value
        return default

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Row:
        return cls({str(key): value for key, value in mapping.items()})
