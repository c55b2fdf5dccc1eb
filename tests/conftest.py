"""Top-level pytest configuration for relata."""

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

# Import for side effects so error codes are registered before tests run
import relata.datasource
import relata.relations.errors

from relata import DataSourceKey, RelationManager, RelationQuery, SqlAlchemyDataAccess
from relata.relations.context import reset_context
from tests.entities import (
    ARCHIVE_ROWS,
    INVENTORY_ROWS,
    MAIN_ROWS,
    archive_metadata,
    inventory_metadata,
    main_metadata,
)


def make_engine(metadata, rows):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    with engine.begin() as connection:
        for table_name, table_rows in rows.items():
            connection.execute(insert(metadata.tables[table_name]), table_rows)
    return engine


class RecordingDataAccess(SqlAlchemyDataAccess):
    """Data access that records each query with the datasource it ran on."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.queries = []

    def select_rows_by_query(self, query):
        self.queries.append((query, DataSourceKey.get()))
        return super().select_rows_by_query(query)

    def tables(self):
        return [query.table for query, _ in self.queries]


class FailingDataAccess(RecordingDataAccess):
    """Raises when a query targets ``fail_on``."""

    def __init__(self, *args, fail_on, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_on = fail_on

    def select_rows_by_query(self, query):
        if query.table == self.fail_on:
            self.queries.append((query, DataSourceKey.get()))
            raise RuntimeError(f"query on {query.table} failed")
        return super().select_rows_by_query(query)


@pytest.fixture(autouse=True)
def reset_relation_state():
    """Each test starts with a default resolution context and no datasource."""
    reset_context()
    DataSourceKey.clear()
    yield
    reset_context()
    DataSourceKey.clear()


@pytest.fixture
def main_engine():
    engine = make_engine(main_metadata, MAIN_ROWS)
    yield engine
    engine.dispose()


@pytest.fixture
def engines(main_engine):
    archive = make_engine(archive_metadata, ARCHIVE_ROWS)
    inventory = make_engine(inventory_metadata, INVENTORY_ROWS)
    yield {"main": main_engine, "archive": archive, "inventory": inventory}
    archive.dispose()
    inventory.dispose()


@pytest.fixture
def access(engines):
    return RecordingDataAccess(engines["main"], datasources=engines)


@pytest.fixture
def manager():
    return RelationManager()


@pytest.fixture
def load(access):
    """Load entities with a plain query, then forget that query."""

    def _load(entity_type, **where):
        query = RelationQuery(table=entity_type.table_name())
        for column_name, value in where.items():
            if isinstance(value, (list, tuple)):
                query.where_in(column_name, value)
            else:
                query.where_eq(column_name, value)
        query.order("id")
        entities = access.select_by_query(query, entity_type)
        access.queries.clear()
        return entities

    return _load
