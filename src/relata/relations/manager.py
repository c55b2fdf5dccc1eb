# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Recursive relation resolution.

``query_relations(access, entities)`` populates the relation fields of a batch
of already loaded entities. For each relation of the batch's type it collects
the grouping keys, queries the related table (through the junction table for
middle-table relations), resolves the relations of the fetched targets one
level deeper, and then attaches them to the batch.

Batches must be homogeneous: the entity type is taken from the first element.
Set ``RelationSettings.check_batch_types`` to have mixed batches rejected.

Query errors are not caught here. They propagate to the caller after the
active datasource has been restored; relations already joined earlier in the
pass stay populated.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Sequence
from typing import Any

from relata.access import DataAccessProtocol, ensure_data_access
from relata.datasource import DataSourceKey
from relata.logging import get_logger, log_context
from relata.relations.cache import RelationMetadataCache
from relata.relations.context import clear_call_config, context_settings, current_context
from relata.relations.descriptor import AbstractRelation
from relata.relations.errors import MixedEntityBatchError
from relata.relations.metadata import EntityMetadataProvider


class RelationManager:
    """Resolves declared relations for entity batches."""

    def __init__(
        self,
        cache: RelationMetadataCache | None = None,
        metadata: EntityMetadataProvider | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the relation manager.

        Args:
            cache: Descriptor cache; a new one is created when omitted
            metadata: Metadata provider for a newly created cache
            logger: Optional logger for diagnostic output
        """
        self.logger = logger or get_logger(__name__)
        self.cache = cache or RelationMetadataCache(metadata=metadata, logger=self.logger)

    def get_relations(self, entity_type: type) -> tuple[AbstractRelation, ...]:
        return self.cache.get_relations(entity_type)

    def query_relations(self, access: DataAccessProtocol, entities: Sequence[Any]) -> None:
        """Populate the relation fields of ``entities`` in place."""
        access = ensure_data_access(access)
        context = current_context()
        max_depth = context.effective_max_depth()
        ignored = frozenset(context.ignore_relations or ())

        try:
            self._resolve(access, entities, 0, max_depth, ignored)
        finally:
            if context.effective_auto_clear():
                clear_call_config()

    def _resolve(
        self,
        access: DataAccessProtocol,
        entities: Sequence[Any],
        depth: int,
        max_depth: int,
        ignored: frozenset[str],
    ) -> None:
        if not entities or depth >= max_depth:
            return

        entity_type = type(entities[0])
        if context_settings().check_batch_types:
            for entity in entities:
                if type(entity) is not entity_type:
                    raise MixedEntityBatchError(entity_type, type(entity))

        relations = self.cache.get_relations(entity_type)
        if not relations:
            return

        with DataSourceKey.preserved() as outer_data_source:
            for relation in relations:
                if relation.name in ignored or relation.simple_name in ignored:
                    self.logger.debug(
                        "Skipping ignored relation", extra={"relation": relation.simple_name}
                    )
                    continue
                with log_context(relation=relation.simple_name, depth=depth):
                    self._resolve_relation(
                        access, relation, entities, depth, max_depth, ignored, outer_data_source
                    )

    def _resolve_relation(
        self,
        access: DataAccessProtocol,
        relation: AbstractRelation,
        entities: Sequence[Any],
        depth: int,
        max_depth: int,
        ignored: frozenset[str],
        outer_data_source: str | None,
    ) -> None:
        mapping_rows = None
        if relation.is_relation_by_middle_table():
            self_values = relation.self_field_values(entities)
            if not self_values:
                return
            mapping_rows = access.select_rows_by_query(relation.build_middle_query(self_values))
            if not mapping_rows:
                return
            target_values = relation.target_values_from_rows(mapping_rows)
        else:
            target_values = relation.self_field_values(entities)

        if not target_values:
            return

        data_source = relation.data_source or outer_data_source
        scope = DataSourceKey.using(data_source) if data_source else contextlib.nullcontext()
        with scope:
            query = relation.build_query(target_values)
            targets = access.select_by_query(query, relation.mapping_type)
            self.logger.debug(
                "Resolved relation",
                extra={
                    "keys": len(target_values),
                    "targets": len(targets),
                    "datasource": data_source,
                },
            )
            if targets:
                self._resolve(access, targets, depth + 1, max_depth, ignored)
                relation.join(entities, targets, mapping_rows)


_default_manager: RelationManager | None = None
_default_manager_lock = threading.Lock()


def get_relation_manager() -> RelationManager:
    """Return the process-wide manager used by :func:`query_relations`."""
    global _default_manager
    if _default_manager is None:
        with _default_manager_lock:
            if _default_manager is None:
                _default_manager = RelationManager()
    return _default_manager


def query_relations(access: DataAccessProtocol, entities: Sequence[Any]) -> None:
    """Populate the relation fields of ``entities`` using the default manager."""
    get_relation_manager().query_relations(access, entities)
