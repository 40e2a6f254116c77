"""Unit tests for MCP response models."""

import pytest
from datetime import datetime
from decimal import Decimal
from pydantic import ValidationError

from redshift_mcp.models.tool_responses import (
    ColumnDescriptor,
    ResourceDescriptor,
    TableDescription,
    TableStatistics,
    ToolResult
)


class TestColumnDescriptor:
    """Test column descriptor model."""

    def test_from_row(self):
        """Test building a descriptor from a catalog row."""
        column = ColumnDescriptor.from_row({
            'column_name': 'created_at',
            'data_type': 'timestamp without time zone',
            'character_maximum_length': None,
            'numeric_precision': None,
            'numeric_scale': None,
            'is_nullable': 'YES',
            'ordinal_position': 3,
            'column_default': None,
            'is_distkey': False,
            'sortkey_order': 2
        })

        assert column.column_name == 'created_at'
        assert column.is_nullable is True
        assert column.is_sortkey is True
        assert column.is_distkey is False

    def test_interleaved_sort_key_is_sort_key(self):
        """Negative sort key order marks an interleaved sort key column."""
        column = ColumnDescriptor.from_row({
            'column_name': 'id', 'data_type': 'integer', 'is_nullable': 'NO',
            'ordinal_position': 1, 'is_distkey': None, 'sortkey_order': -1
        })

        assert column.is_sortkey is True
        assert column.is_distkey is False
        assert column.is_nullable is False

    def test_missing_sortkey_order(self):
        column = ColumnDescriptor.from_row({
            'column_name': 'id', 'data_type': 'integer', 'is_nullable': 'NO', 'ordinal_position': 1
        })
        assert column.is_sortkey is False

    def test_invalid_ordinal(self):
        with pytest.raises(ValidationError):
            ColumnDescriptor(column_name='x', data_type='integer', is_nullable='NO', ordinal_position=0)


class TestTableModels:
    """Test statistics and description models."""

    def test_statistics_alias(self):
        stats = TableStatistics(**{
            'database': 'dev', 'schema': 'sales', 'table_id': 1, 'table_name': 'orders',
            'total_size_mb': Decimal('10'), 'create_time': datetime(2024, 1, 1)
        })

        assert stats.schema_name == 'sales'
        dumped = stats.model_dump(by_alias=True)
        assert dumped['schema'] == 'sales'
        assert 'schema_name' not in dumped

    def test_description_dump(self):
        description = TableDescription(schema='sales', table='orders', columns=[], statistics=[{'row_count': 'Unknown'}])

        assert description.model_dump(by_alias=True) == {
            'schema': 'sales',
            'table': 'orders',
            'columns': [],
            'statistics': [{'row_count': 'Unknown'}]
        }


class TestEnvelopeModels:
    """Test resource descriptor and tool result models."""

    def test_resource_descriptor_default_mime_type(self):
        descriptor = ResourceDescriptor(uri="redshift://h/schema/public", name="Schema: public")
        assert descriptor.mime_type == "application/json"

    def test_tool_result_success(self):
        result = ToolResult.success('[]')

        assert result.is_error is False
        assert result.text == '[]'

    def test_tool_result_error(self):
        result = ToolResult.error("Unknown tool: x")

        assert result.model_dump(by_alias=True) == {
            'content': [{'type': 'text', 'text': 'Unknown tool: x'}],
            'isError': True
        }
