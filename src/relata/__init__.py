# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata

"""
relata: batched, depth-bounded resolution of entity relations.
"""

from relata.config import RelationSettings, get_settings
from relata.datasource import DataSourceKey, DataSourceNotFoundError
from relata.errors import ErrorSeverity, RelataError
from relata.model import Entity
from relata.query import QueryCondition, RelationQuery
from relata.row import Row
from relata.relations import (
    RelationDeclarationError,
    RelationManager,
    RelationManyToMany,
    RelationManyToOne,
    RelationOneToMany,
    RelationOneToOne,
    query_relations,
    relation_scope,
)
from relata.access import DataAccessProtocol, SqlAlchemyDataAccess

__all__ = [
    "DataAccessProtocol",
    "DataSourceKey",
    "DataSourceNotFoundError",
    "Entity",
    "ErrorSeverity",
    "QueryCondition",
    "RelataError",
    "RelationDeclarationError",
    "RelationManager",
    "RelationManyToMany",
    "RelationManyToOne",
    "RelationOneToMany",
    "RelationOneToOne",
    "RelationQuery",
    "RelationSettings",
    "Row",
    "SqlAlchemyDataAccess",
    "get_settings",
    "query_relations",
    "relation_scope",
]
