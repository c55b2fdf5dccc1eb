# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Relation descriptors.

One descriptor is built per relation-marked field. It knows how to collect the
grouping keys of a batch, build the lookup query for the related table (and
for the junction table when there is one) and attach fetched targets back onto
the batch.

Hierarchy::

    AbstractRelation
    ├── ToOneRelation   -> OneToOne, ManyToOne
    └── ToManyRelation  -> OneToMany, ManyToMany
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, ClassVar, Literal

from relata.query import RelationQuery
from relata.relations.context import extra_condition_values
from relata.relations.errors import RelationDeclarationError
from relata.relations.markers import RelationKind, RelationMarker
from relata.relations.metadata import (
    EntityMetadataProvider,
    RelationField,
    container_of,
    element_type,
)
from relata.row import Row

JoinPolicy = Literal["required", "optional", "forbidden"]


def _key(value: Any) -> str:
    """Join key; string form so junction columns typed as text still match."""
    return str(value)


class AbstractRelation:
    """Metadata and behaviour for one declared relation field."""

    kind: ClassVar[RelationKind]
    default_self_to_primary_key: ClassVar[bool]
    default_target_to_primary_key: ClassVar[bool]
    join_policy: ClassVar[JoinPolicy]

    def __init__(
        self,
        owner: type,
        relation_field: RelationField,
        metadata: EntityMetadataProvider,
    ) -> None:
        marker = relation_field.marker
        self.owner = owner
        self.name = relation_field.name
        self.simple_name = f"{owner.__name__}.{relation_field.name}"
        self.container = container_of(relation_field.annotation)

        target_type = marker.target_entity or element_type(relation_field.annotation)
        if target_type is None or not metadata.is_entity(target_type):
            raise self._declaration_error(
                "cannot infer the target entity type; set target_entity"
            )
        self.target_type: type = target_type

        self.self_field = self._resolve_field(
            marker.self_field,
            owner,
            self.default_self_to_primary_key,
            "self_field",
            metadata,
        )
        self.target_field = self._resolve_field(
            marker.target_field,
            target_type,
            self.default_target_to_primary_key,
            "target_field",
            metadata,
        )
        self.target_column = metadata.column_name(target_type, self.target_field)
        self.target_table = marker.target_table or metadata.table_name(target_type)
        self.target_schema = marker.target_schema or None

        self._check_join_attributes(marker)
        self.join_table = marker.join_table
        self.join_self_column = marker.join_self_column
        self.join_target_column = marker.join_target_column

        self.data_source = (marker.data_source or "").strip() or None
        self.extra_condition = (marker.extra_condition or "").strip() or None
        self.extra_condition_param_keys = marker.extra_condition_param_keys()

        self.value_field = self._check_target_field(marker.value_field, "value_field", metadata)
        self.map_key_field = self._check_target_field(
            marker.map_key_field, "map_key_field", metadata
        )
        if self.container is dict and self.map_key_field is None:
            raise self._declaration_error("dict-typed relation fields need map_key_field")

        self.select_columns = self._target_columns(marker.select_columns, metadata)
        if self.select_columns and self.target_column not in self.select_columns:
            self.select_columns = self.select_columns + (self.target_column,)
        self.order_by = tuple(
            ("-" if name.startswith("-") else "")
            + self._target_columns((name.lstrip("-"),), metadata)[0]
            for name in marker.order_by
        )

    @property
    def mapping_type(self) -> type:
        return self.target_type

    def is_relation_by_middle_table(self) -> bool:
        return self.join_table is not None

    def self_field_values(self, entities: Iterable[Any]) -> tuple[Any, ...]:
        """Distinct non-null self-side key values, in first-seen order."""
        values = (getattr(entity, self.self_field, None) for entity in entities)
        return tuple(dict.fromkeys(value for value in values if value is not None))

    def build_middle_query(self, self_values: Sequence[Any]) -> RelationQuery:
        """Query the junction table for rows belonging to ``self_values``."""
        return RelationQuery(table=self.join_table).where_values(
            self.join_self_column, self_values
        )

    def target_values_from_rows(self, rows: Iterable[Row]) -> tuple[Any, ...]:
        values = (row.get(self.join_target_column) for row in rows)
        return tuple(dict.fromkeys(value for value in values if value is not None))

    def build_query(self, target_values: Sequence[Any]) -> RelationQuery:
        """Query the target table for rows whose target column is in ``target_values``."""
        query = RelationQuery(
            table=self.target_table,
            schema=self.target_schema,
            columns=self.select_columns,
        )
        query.where_values(self.target_column, target_values)
        if self.extra_condition:
            params = extra_condition_values(self.extra_condition_param_keys)
            query.and_sql(
                self.extra_condition,
                dict(zip(self.extra_condition_param_keys, params, strict=True)),
            )
        if self.order_by:
            query.order(*self.order_by)
        return query

    def join(
        self,
        entities: Sequence[Any],
        targets: Sequence[Any],
        mapping_rows: Sequence[Row] | None = None,
    ) -> None:
        """Assign matching ``targets`` onto each entity's relation field.

        Matches keep the order of ``targets``. Entities with no match are left
        untouched.
        """
        if mapping_rows is not None:
            target_keys_by_self: dict[str, set[str]] = {}
            for row in mapping_rows:
                self_value = row.get(self.join_self_column)
                target_value = row.get(self.join_target_column)
                if self_value is None or target_value is None:
                    continue
                target_keys_by_self.setdefault(_key(self_value), set()).add(_key(target_value))
        else:
            target_keys_by_self = None

        for entity in entities:
            self_value = getattr(entity, self.self_field, None)
            if self_value is None:
                continue
            if target_keys_by_self is None:
                wanted = {_key(self_value)}
            else:
                wanted = target_keys_by_self.get(_key(self_value))
                if not wanted:
                    continue
            matches = [
                target
                for target in targets
                if _key(getattr(target, self.target_field, None)) in wanted
            ]
            if matches:
                setattr(entity, self.name, self.shape(matches))

    def shape(self, matches: list[Any]) -> Any:
        raise NotImplementedError

    def _value_of(self, target: Any) -> Any:
        if self.value_field is None:
            return target
        return getattr(target, self.value_field, None)

    def _resolve_field(
        self,
        declared: str | None,
        entity_type: type,
        default_to_primary_key: bool,
        attribute: str,
        metadata: EntityMetadataProvider,
    ) -> str:
        if declared:
            field_name = declared
        elif default_to_primary_key:
            field_name = metadata.primary_key(entity_type)
        else:
            raise self._declaration_error(f"{attribute} is required for {self.kind.value}")
        if not metadata.has_field(entity_type, field_name):
            raise self._declaration_error(
                f"{attribute} '{field_name}' is not a field of {entity_type.__name__}"
            )
        return field_name

    def _check_target_field(
        self, declared: str | None, attribute: str, metadata: EntityMetadataProvider
    ) -> str | None:
        if declared and not metadata.has_field(self.target_type, declared):
            raise self._declaration_error(
                f"{attribute} '{declared}' is not a field of {self.target_type.__name__}"
            )
        return declared or None

    def _target_columns(
        self, names: Iterable[str], metadata: EntityMetadataProvider
    ) -> tuple[str, ...]:
        # Field names map to their columns; anything else is taken as a raw column
        return tuple(
            metadata.column_name(self.target_type, name)
            if metadata.has_field(self.target_type, name)
            else name
            for name in names
        )

    def _check_join_attributes(self, marker: RelationMarker) -> None:
        given = {key: value for key, value in marker.join_attributes().items() if value}
        if self.join_policy == "forbidden" and given:
            raise self._declaration_error(
                f"{self.kind.value} relations cannot use a middle table "
                f"(got {', '.join(sorted(given))})"
            )
        if self.join_policy == "required" and not given:
            raise self._declaration_error(
                "join_table, join_self_column and join_target_column are required"
            )
        if given and len(given) != 3:
            missing = sorted(set(marker.join_attributes()) - set(given))
            raise self._declaration_error(
                f"incomplete middle table declaration, missing {', '.join(missing)}"
            )

    def _declaration_error(self, message: str) -> RelationDeclarationError:
        return RelationDeclarationError(
            f"{self.simple_name}: {message}",
            entity_type=self.owner,
            field_name=self.name,
            relation_kind=self.kind.value,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.simple_name} -> {self.target_type.__name__}>"


class ToOneRelation(AbstractRelation):
    def shape(self, matches: list[Any]) -> Any:
        return self._value_of(matches[0])


class ToManyRelation(AbstractRelation):
    def shape(self, matches: list[Any]) -> Any:
        if self.container is dict:
            return {getattr(target, self.map_key_field): self._value_of(target) for target in matches}
        values = [self._value_of(target) for target in matches]
        if self.container in (set, frozenset, tuple):
            return self.container(values)
        return values


class OneToOne(ToOneRelation):
    kind = RelationKind.ONE_TO_ONE
    default_self_to_primary_key = True
    default_target_to_primary_key = False
    join_policy: ClassVar[JoinPolicy] = "optional"


class ManyToOne(ToOneRelation):
    kind = RelationKind.MANY_TO_ONE
    default_self_to_primary_key = False
    default_target_to_primary_key = True
    join_policy: ClassVar[JoinPolicy] = "forbidden"


class OneToMany(ToManyRelation):
    kind = RelationKind.ONE_TO_MANY
    default_self_to_primary_key = True
    default_target_to_primary_key = False
    join_policy: ClassVar[JoinPolicy] = "optional"


class ManyToMany(ToManyRelation):
    kind = RelationKind.MANY_TO_MANY
    default_self_to_primary_key = True
    default_target_to_primary_key = True
    join_policy: ClassVar[JoinPolicy] = "required"


RELATION_TYPES: dict[RelationKind, type[AbstractRelation]] = {
    RelationKind.ONE_TO_ONE: OneToOne,
    RelationKind.ONE_TO_MANY: OneToMany,
    RelationKind.MANY_TO_ONE: ManyToOne,
    RelationKind.MANY_TO_MANY: ManyToMany,
}


def create_relation(
    owner: type, relation_field: RelationField, metadata: EntityMetadataProvider
) -> AbstractRelation:
    """Build the descriptor matching the field's marker kind."""
    relation_type = RELATION_TYPES[relation_field.marker.kind]
    return relation_type(owner, relation_field, metadata)
