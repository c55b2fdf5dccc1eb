# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""Per-type cache of relation descriptors."""

from __future__ import annotations

import logging
import threading

from relata.logging import get_logger
from relata.relations.descriptor import AbstractRelation, create_relation
from relata.relations.metadata import EntityMetadataProvider, PydanticMetadataProvider


class RelationMetadataCache:
    """
    Discovers the relations declared on an entity type once and memoizes them.

    Reads of an already cached type take no lock. The first lookup of a type
    builds its descriptors under a lock, so concurrent first callers converge
    on a single stored tuple. Entries are never invalidated.
    """

    def __init__(
        self,
        metadata: EntityMetadataProvider | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.metadata = metadata or PydanticMetadataProvider()
        self.logger = logger or get_logger(__name__)
        self._relations: dict[type, tuple[AbstractRelation, ...]] = {}
        self._lock = threading.RLock()

        # Statistics
        self.discoveries = 0

    def get_relations(self, entity_type: type) -> tuple[AbstractRelation, ...]:
        relations = self._relations.get(entity_type)
        if relations is not None:
            return relations

        with self._lock:
            relations = self._relations.get(entity_type)
            if relations is None:
                relations = self._discover(entity_type)
                self._relations[entity_type] = relations
            return relations

    def _discover(self, entity_type: type) -> tuple[AbstractRelation, ...]:
        relations = tuple(
            create_relation(entity_type, relation_field, self.metadata)
            for relation_field in self.metadata.relation_fields(entity_type)
        )
        self.discoveries += 1
        self.logger.debug(
            "Discovered relations",
            extra={
                "entity_type": entity_type.__name__,
                "relations": [relation.name for relation in relations],
            },
        )
        return relations

    def __contains__(self, entity_type: type) -> bool:
        return entity_type in self._relations

    def clear(self) -> None:
        with self._lock:
            self._relations.clear()
