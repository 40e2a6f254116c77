"""Table-level tools: column descriptors, describe_table and find_column."""

from typing import Any, Dict, List

from redshift_mcp.lib.logging_config import get_logger
from redshift_mcp.lib.sql import COLUMNS_QUERY, FIND_COLUMN_QUERY, STATISTICS_SUMMARY_QUERY
from redshift_mcp.models.tool_responses import ColumnDescriptor, TableDescription
from redshift_mcp.services.database_service import DatabaseService
from redshift_mcp.services.query_utils import escape_like_pattern

logger = get_logger(__name__)

UNKNOWN = "Unknown"
STATISTICS_PLACEHOLDER = {
    'total_size_mb': UNKNOWN,
    'row_count': UNKNOWN,
    'create_time': UNKNOWN
}


def fetch_columns(db_service: DatabaseService, cursor,
                  schema: str, table: str) -> List[ColumnDescriptor]:
    """Fetch column descriptors for a table, ordered by ordinal position.

    Args:
        db_service: Database service instance
        cursor: Open cursor from ``db_service.cursor()``
        schema: Schema name
        table: Table name

    Returns:
        Column descriptors with distribution and sort key flags
    """
    rows = db_service.run_query(cursor, COLUMNS_QUERY, (schema, table))
    columns = [ColumnDescriptor.from_row(row) for row in rows]
    return sorted(columns, key=lambda column: column.ordinal_position)


def describe_table(db_service: DatabaseService, schema: str, table: str) -> Dict[str, Any]:
    """Describe a table: its columns plus size, row count and creation time.

    A table with no statistics row gets a single placeholder entry whose
    fields all read "Unknown".

    Args:
        db_service: Database service instance
        schema: Schema name
        table: Table name

    Returns:
        Dictionary with schema, table, columns and statistics
    """
    with db_service.cursor() as cursor:
        columns = fetch_columns(db_service, cursor, schema, table)
        statistics = db_service.run_query(cursor, STATISTICS_SUMMARY_QUERY, (schema, table))

    if not statistics:
        logger.debug(f"No statistics for {schema}.{table}, using placeholder")
        statistics = [dict(STATISTICS_PLACEHOLDER)]

    description = TableDescription(
        schema=schema,
        table=table,
        columns=columns,
        statistics=statistics
    )
    logger.info(f"Described table {schema}.{table} ({len(columns)} columns)")
    return description.model_dump(by_alias=True)


def find_column(db_service: DatabaseService, pattern: str) -> List[Dict[str, Any]]:
    """Find columns whose name contains ``pattern``, ignoring case.

    LIKE wildcards in the pattern are matched literally. An empty pattern
    matches every column.

    Args:
        db_service: Database service instance
        pattern: Substring to look for

    Returns:
        Rows of table_schema, table_name, column_name, data_type ordered by
        schema, table and column
    """
    like_pattern = f"%{escape_like_pattern(pattern)}%"
    rows = db_service.execute_query(FIND_COLUMN_QUERY, (like_pattern,))
    logger.info(f"find_column matched {len(rows)} columns for pattern {pattern!r}")
    return rows
