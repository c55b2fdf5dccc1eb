# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Data access for relation lookups.

The resolver only needs two operations, described by
:class:`DataAccessProtocol`. :class:`SqlAlchemyDataAccess` implements them on
SQLAlchemy engines, choosing the engine named by the active datasource key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from relata.datasource import DataSourceKey, DataSourceNotFoundError
from relata.logging import get_logger
from relata.query import RelationQuery
from relata.relations.metadata import EntityMetadataProvider, PydanticMetadataProvider
from relata.row import Row

T = TypeVar("T")


@runtime_checkable
class DataAccessProtocol(Protocol):
    """Query execution capability used by the relation resolver."""

    def select_by_query(self, query: RelationQuery, result_type: type[T]) -> list[T]: ...

    def select_rows_by_query(self, query: RelationQuery) -> list[Row]: ...


class SqlAlchemyDataAccess:
    """
    Executes relation queries through SQLAlchemy sessions.

    Args:
        engine: Engine used while no datasource key is active
        datasources: Engines by datasource key
        metadata: Builds entities from result rows
        logger: Optional logger instance
    """

    def __init__(
        self,
        engine: Engine,
        datasources: Mapping[str, Engine] | None = None,
        metadata: EntityMetadataProvider | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.engine = engine
        self.datasources = dict(datasources or {})
        self.metadata = metadata or PydanticMetadataProvider()
        self.logger = logger or get_logger(__name__)
        self._session_factories: dict[Engine, sessionmaker[Session]] = {}

    def current_engine(self) -> Engine:
        key = DataSourceKey.get()
        if key is None:
            return self.engine
        try:
            return self.datasources[key]
        except KeyError:
            raise DataSourceNotFoundError(key, available=sorted(self.datasources)) from None

    def session(self) -> Session:
        engine = self.current_engine()
        factory = self._session_factories.get(engine)
        if factory is None:
            factory = sessionmaker(bind=engine)
            self._session_factories[engine] = factory
        return factory()

    def select_rows_by_query(self, query: RelationQuery) -> list[Row]:
        statement = query.to_statement()
        self.logger.debug(
            "Executing relation query",
            extra={"table": query.table, "datasource": DataSourceKey.get()},
        )
        with self.session() as session:
            result = session.execute(statement)
            return [Row.from_mapping(mapping) for mapping in result.mappings()]

    def select_by_query(self, query: RelationQuery, result_type: type[T]) -> list[T]:
        return [
            self.metadata.instantiate(result_type, row)
            for row in self.select_rows_by_query(query)
        ]


def ensure_data_access(access: Any) -> DataAccessProtocol:
    if not isinstance(access, DataAccessProtocol):
        raise TypeError(
            f"{type(access).__name__} does not implement select_by_query/select_rows_by_query"
        )
    return access
