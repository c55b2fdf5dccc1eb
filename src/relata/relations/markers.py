# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Relation markers.

Markers are attached to entity fields with ``typing.Annotated``::

    class Account(Entity):
        id: int
        dept_id: int | None = None
        dept: Annotated[Dept | None, RelationManyToOne(self_field="dept_id")] = None
        roles: Annotated[
            list[Role] | None,
            RelationManyToMany(
                join_table="tb_role_mapping",
                join_self_column="account_id",
                join_target_column="role_id",
            ),
        ] = None

Field names are entity attribute names; ``join_*`` values and
``extra_condition`` are raw column names / SQL.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_PARAM_PATTERN = re.compile(r"(?<![:\w\\]):(\w+)(?!:)")


class RelationKind(str, Enum):
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_ONE = "many_to_one"
    MANY_TO_MANY = "many_to_many"


def _as_names(value: str | tuple[str, ...] | list[str] | None) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(value)


@dataclass(frozen=True, kw_only=True)
class RelationMarker:
    """Attributes shared by every relation kind."""

    kind: RelationKind = field(init=False)
    self_field: str | None = None
    target_field: str | None = None
    target_entity: type | None = None
    target_schema: str | None = None
    target_table: str | None = None
    join_table: str | None = None
    join_self_column: str | None = None
    join_target_column: str | None = None
    data_source: str | None = None
    extra_condition: str | None = None
    select_columns: tuple[str, ...] = ()
    order_by: tuple[str, ...] = ()
    value_field: str | None = None
    map_key_field: str | None = None

    def __post_init__(self) -> None:
        # Comma separated strings are accepted for the column lists
        object.__setattr__(self, "select_columns", _as_names(self.select_columns))
        object.__setattr__(self, "order_by", _as_names(self.order_by))

    def join_attributes(self) -> dict[str, Any]:
        return {
            "join_table": self.join_table,
            "join_self_column": self.join_self_column,
            "join_target_column": self.join_target_column,
        }

    def extra_condition_param_keys(self) -> tuple[str, ...]:
        """Placeholder names in ``extra_condition``, in order of first use."""
        if not self.extra_condition:
            return ()
        return tuple(dict.fromkeys(_PARAM_PATTERN.findall(self.extra_condition)))


@dataclass(frozen=True, kw_only=True)
class RelationOneToOne(RelationMarker):
    kind: RelationKind = field(default=RelationKind.ONE_TO_ONE, init=False)


@dataclass(frozen=True, kw_only=True)
class RelationOneToMany(RelationMarker):
    kind: RelationKind = field(default=RelationKind.ONE_TO_MANY, init=False)


@dataclass(frozen=True, kw_only=True)
class RelationManyToOne(RelationMarker):
    kind: RelationKind = field(default=RelationKind.MANY_TO_ONE, init=False)


@dataclass(frozen=True, kw_only=True)
class RelationManyToMany(RelationMarker):
    kind: RelationKind = field(default=RelationKind.MANY_TO_MANY, init=False)
