"""Fake database service shared by the contract tests."""

import pytest
from unittest.mock import MagicMock

from redshift_mcp.lib.sql import (
    COLUMNS_QUERY,
    FIND_COLUMN_QUERY,
    SCHEMAS_QUERY,
    STATISTICS_QUERY,
    STATISTICS_SUMMARY_QUERY,
    TABLES_QUERY
)


class FakeWarehouse:
    """Answers catalog queries from in-memory rows."""

    def __init__(self):
        self.schemas = {}
        self.columns = {}
        self.statistics = {}
        self.samples = {}
        self.found_columns = []
        self.queries = []

    def answer(self, query, params=None):
        self.queries.append((query, params))
        if query == SCHEMAS_QUERY:
            return [{'schema_name': name} for name in self.schemas]
        if query == TABLES_QUERY:
            return [{'table_name': name} for name in self.schemas.get(params[0], [])]
        if query == COLUMNS_QUERY:
            return [dict(row) for row in self.columns.get(params, [])]
        if query in (STATISTICS_QUERY, STATISTICS_SUMMARY_QUERY):
            return [dict(row) for row in self.statistics.get(params, [])]
        if query == FIND_COLUMN_QUERY:
            return list(self.found_columns)
        if query.startswith("SELECT * FROM"):
            return [dict(row) for row in self.samples.get(query, [])]
        raise AssertionError(f"Unexpected query: {query}")


@pytest.fixture
def warehouse():
    return FakeWarehouse()


@pytest.fixture
def mock_db(warehouse):
    """Mock DatabaseService whose queries are answered by ``warehouse``."""
    mock = MagicMock()
    mock.config = {'database': 'dev'}
    mock.run_query.side_effect = lambda cursor, query, params=None, fetch=True: warehouse.answer(query, params)
    mock.execute_query.side_effect = lambda query, params=None: warehouse.answer(query, params)
    mock.execute_readonly_query.return_value = []
    return mock
