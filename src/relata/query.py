# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Query descriptors for relation lookups.

A :class:`RelationQuery` describes "select columns from table where column
equals / is in values", optionally narrowed by a raw SQL fragment with bound
parameters and ordered by columns. ``to_statement`` compiles it to a
SQLAlchemy Core ``Select``.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from sqlalchemy import Select, and_, column, literal_column, select, table, text

Operator = Literal["eq", "in"]


@dataclass(frozen=True)
class QueryCondition:
    column: str
    operator: Operator
    value: Any


@dataclass
class RelationQuery:
    """Mutable description of a single-table select."""

    table: str
    schema: str | None = None
    columns: tuple[str, ...] = ()
    conditions: list[QueryCondition] = field(default_factory=list)
    extra_sql: str | None = None
    extra_params: dict[str, Any] = field(default_factory=dict)
    order_by: tuple[str, ...] = ()

    def where_eq(self, column_name: str, value: Any) -> RelationQuery:
        self.conditions.append(QueryCondition(column_name, "eq", value))
        return self

    def where_in(self, column_name: str, values: Iterable[Any]) -> RelationQuery:
        self.conditions.append(QueryCondition(column_name, "in", tuple(values)))
        return self

    def where_values(self, column_name: str, values: Collection[Any]) -> RelationQuery:
        """Filter on ``values``: equality for a single value, ``IN`` otherwise."""
        if len(values) == 1:
            return self.where_eq(column_name, next(iter(values)))
        return self.where_in(column_name, values)

    def and_sql(self, sql: str, params: Mapping[str, Any] | None = None) -> RelationQuery:
        """AND a raw SQL fragment using ``:name`` placeholders."""
        if self.extra_sql:
            self.extra_sql = f"({self.extra_sql}) AND ({sql})"
        else:
            self.extra_sql = sql
        self.extra_params.update(params or {})
        return self

    def order(self, *fields: str) -> RelationQuery:
        """Append order columns; a leading ``-`` means descending."""
        self.order_by = self.order_by + tuple(fields)
        return self

    def to_statement(self) -> Select:
        """Compile to a SQLAlchemy ``Select``."""
        names = set(self.columns)
        names.update(condition.column for condition in self.conditions)
        names.update(name.lstrip("-") for name in self.order_by)
        source = table(self.table, *(column(name) for name in sorted(names)), schema=self.schema)

        if self.columns:
            stmt = select(*(source.c[name] for name in self.columns))
        else:
            stmt = select(literal_column("*")).select_from(source)

        clauses = []
        for condition in self.conditions:
            target = source.c[condition.column]
            if condition.operator == "eq":
                clauses.append(target == condition.value)
            else:
                clauses.append(target.in_(list(condition.value)))
        if self.extra_sql:
            clauses.append(text(self.extra_sql).bindparams(**self.extra_params))
        if clauses:
            stmt = stmt.where(and_(*clauses))

        for name in self.order_by:
            descending = name.startswith("-")
            target = source.c[name.lstrip("-")]
            stmt = stmt.order_by(target.desc() if descending else target)
        return stmt
