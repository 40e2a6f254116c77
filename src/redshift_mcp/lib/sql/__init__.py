"""Catalog SQL used by the resource and tool layers."""

from .catalog import (
    SCHEMAS_QUERY,
    TABLES_QUERY,
    COLUMNS_QUERY,
    STATISTICS_QUERY,
    STATISTICS_SUMMARY_QUERY,
    FIND_COLUMN_QUERY,
    SAMPLE_ROW_LIMIT,
    sample_query
)

__all__ = [
    'SCHEMAS_QUERY',
    'TABLES_QUERY',
    'COLUMNS_QUERY',
    'STATISTICS_QUERY',
    'STATISTICS_SUMMARY_QUERY',
    'FIND_COLUMN_QUERY',
    'SAMPLE_ROW_LIMIT',
    'sample_query'
]
