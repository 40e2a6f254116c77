"""Catalog SQL for Redshift system views.

Every query here binds its values as parameters except ``sample_query``,
which has to embed identifiers and does so only through
``quote_identifier``.
"""

from redshift_mcp.services.query_utils import quote_identifier

SAMPLE_ROW_LIMIT = 5

# Schemas hidden from listings. This is a naming denylist for Redshift and
# PostgreSQL system schemas, not an access control mechanism: anything the
# connecting user can see and that is not listed here is exposed.
# Runs without bound parameters, so "%" needs no escaping.
SCHEMAS_QUERY = """
    SELECT nspname AS schema_name
    FROM pg_namespace
    WHERE nspname NOT LIKE 'pg_%'
    AND nspname NOT IN ('information_schema', 'sys')
    AND nspname NOT LIKE 'stl%'
    AND nspname NOT LIKE 'stv%'
    AND nspname NOT LIKE 'svv%'
    AND nspname NOT LIKE 'svl%'
    ORDER BY schema_name
"""

TABLES_QUERY = """
    SELECT table_name
    FROM svv_tables
    WHERE table_schema = %s
    ORDER BY table_name
"""

COLUMNS_QUERY = """
    SELECT
        c.column_name,
        c.data_type,
        c.character_maximum_length,
        c.numeric_precision,
        c.numeric_scale,
        c.is_nullable,
        c.ordinal_position,
        c.column_default,
        a.attisdistkey AS is_distkey,
        COALESCE(a.attsortkeyord, 0) AS sortkey_order
    FROM svv_columns c
    INNER JOIN pg_namespace n ON n.nspname = c.table_schema
    INNER JOIN pg_class r ON r.relname = c.table_name AND r.relnamespace = n.oid
    INNER JOIN pg_attribute a ON a.attrelid = r.oid AND a.attname = c.column_name
    WHERE c.table_schema = %s
    AND c.table_name = %s
    ORDER BY c.ordinal_position
"""

STATISTICS_QUERY = """
    SELECT
        database,
        schema,
        table_id,
        "table" AS table_name,
        size AS total_size_mb,
        pct_used AS percent_used,
        tbl_rows AS row_count,
        encoded,
        diststyle,
        sortkey1,
        max_varchar,
        create_time
    FROM svv_table_info
    WHERE schema = %s
    AND "table" = %s
"""

STATISTICS_SUMMARY_QUERY = """
    SELECT
        size AS total_size_mb,
        tbl_rows AS row_count,
        create_time
    FROM svv_table_info
    WHERE schema = %s
    AND "table" = %s
"""

FIND_COLUMN_QUERY = """
    SELECT
        table_schema,
        table_name,
        column_name,
        data_type
    FROM svv_columns
    WHERE column_name ILIKE %s ESCAPE '!'
    ORDER BY table_schema, table_name, column_name
"""


def sample_query(schema_name: str, table_name: str) -> str:
    """Build the sampling query for one table.

    No filter and no ORDER BY: the engine returns whichever rows it
    reaches first.
    """
    return (
        f"SELECT * FROM {quote_identifier(schema_name)}.{quote_identifier(table_name)} "
        f"LIMIT {SAMPLE_ROW_LIMIT}"
    )
