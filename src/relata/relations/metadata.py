# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Entity metadata capability.

The relation engine never inspects entity classes directly; it asks an
:class:`EntityMetadataProvider` for table names, key fields, column names and
the relation markers declared on each field.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from relata.relations.markers import RelationMarker


@dataclass(frozen=True)
class RelationField:
    """A field carrying a relation marker, in declaration order."""

    name: str
    annotation: Any
    marker: RelationMarker


@runtime_checkable
class EntityMetadataProvider(Protocol):
    """Structural metadata the resolver needs about entity types."""

    def is_entity(self, entity_type: Any) -> bool: ...

    def table_name(self, entity_type: type) -> str: ...

    def primary_key(self, entity_type: type) -> str: ...

    def has_field(self, entity_type: type, field_name: str) -> bool: ...

    def column_name(self, entity_type: type, field_name: str) -> str: ...

    def relation_fields(self, entity_type: type) -> list[RelationField]: ...

    def instantiate(self, entity_type: type, row: Mapping[str, Any]) -> Any: ...


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from ``X | None`` / ``Optional[X]``."""
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def container_of(annotation: Any) -> type | None:
    """Return ``list``, ``set``, ``tuple`` or ``dict`` for collection annotations."""
    origin = typing.get_origin(unwrap_optional(annotation))
    if origin in (list, set, frozenset, tuple, dict):
        return origin
    return None


def element_type(annotation: Any) -> type | None:
    """Infer the related entity type from a field annotation."""
    annotation = unwrap_optional(annotation)
    origin = typing.get_origin(annotation)
    args = typing.get_args(annotation)
    if origin in (list, set, frozenset, tuple) and args:
        annotation = unwrap_optional(args[0])
    elif origin is dict and len(args) == 2:
        annotation = unwrap_optional(args[1])
    if isinstance(annotation, type):
        return annotation
    return None


class PydanticMetadataProvider:
    """Metadata provider for pydantic models such as :class:`relata.model.Entity`.

    Table names come from ``table_name()`` / ``__tablename__`` when present,
    otherwise the lowercased class name. Column names are the field alias or
    the field name.
    """

    def is_entity(self, entity_type: Any) -> bool:
        return isinstance(entity_type, type) and issubclass(entity_type, BaseModel)

    def table_name(self, entity_type: type) -> str:
        if hasattr(entity_type, "table_name"):
            return entity_type.table_name()
        return getattr(entity_type, "__tablename__", None) or entity_type.__name__.lower()

    def primary_key(self, entity_type: type) -> str:
        return getattr(entity_type, "__primary_key__", "id")

    def has_field(self, entity_type: type, field_name: str) -> bool:
        return field_name in self._fields(entity_type)

    def column_name(self, entity_type: type, field_name: str) -> str:
        info = self._fields(entity_type).get(field_name)
        if info is not None and info.alias:
            return info.alias
        return field_name

    def relation_fields(self, entity_type: type) -> list[RelationField]:
        found = []
        for name, info in self._fields(entity_type).items():
            for item in info.metadata:
                if isinstance(item, RelationMarker):
                    found.append(RelationField(name, info.annotation, item))
        return found

    def instantiate(self, entity_type: type, row: Mapping[str, Any]) -> Any:
        by_column = {key.casefold(): value for key, value in row.items()}
        data = {}
        for name in self._fields(entity_type):
            # pydantic validates by alias
            column = self.column_name(entity_type, name)
            if column.casefold() in by_column:
                data[column] = by_column[column.casefold()]
        return entity_type.model_validate(data)

    def _fields(self, entity_type: type) -> dict[str, Any]:
        if not self.is_entity(entity_type):
            raise TypeError(f"{entity_type!r} is not a pydantic model")
        if not entity_type.__pydantic_complete__:
            # Forward references (e.g. self-referencing relations) resolve here
            entity_type.model_rebuild()
        return entity_type.model_fields
