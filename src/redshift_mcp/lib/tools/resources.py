"""Resource reader: schema listings and per-table resources."""

from typing import Any, Dict, List

from redshift_mcp.lib.logging_config import get_logger
from redshift_mcp.lib.sql import STATISTICS_QUERY, TABLES_QUERY, sample_query
from redshift_mcp.lib.tools.table import fetch_columns
from redshift_mcp.models.error_types import InvalidAddress, UnknownKind
from redshift_mcp.models.resources import (
    ResourceAddress,
    ResourceKind,
    SchemaListing,
    TableResource,
    parse_resource_uri
)
from redshift_mcp.models.tool_responses import TableStatistics
from redshift_mcp.services.database_service import DatabaseService
from redshift_mcp.services.query_utils import redact_rows, to_json

logger = get_logger(__name__)


def read_resource(db_service: DatabaseService, address: ResourceAddress) -> List[Dict[str, Any]]:
    """Fetch and shape the rows behind a resource address.

    Args:
        db_service: Database service instance
        address: Parsed resource address

    Returns:
        Result rows for the resource

    Raises:
        InvalidAddress: If the address is not a known shape
        UnknownKind: If a table resource has an unrecognised kind
        EngineError: If a query fails
    """
    if isinstance(address, SchemaListing):
        return db_service.execute_query(TABLES_QUERY, (address.schema_name,))
    elif isinstance(address, TableResource):
        return _read_table_resource(db_service, address)
    raise InvalidAddress(repr(address))


def _read_table_resource(db_service: DatabaseService, address: TableResource) -> List[Dict[str, Any]]:
    schema, table = address.schema_name, address.table_name

    if address.kind is ResourceKind.SCHEMA:
        with db_service.cursor() as cursor:
            columns = fetch_columns(db_service, cursor, schema, table)
        return [column.model_dump() for column in columns]

    elif address.kind is ResourceKind.SAMPLE:
        rows = db_service.execute_query(sample_query(schema, table))
        return redact_rows(rows)

    elif address.kind is ResourceKind.STATISTICS:
        rows = db_service.execute_query(STATISTICS_QUERY, (schema, table))
        return [TableStatistics(**row).model_dump(by_alias=True) for row in rows]

    raise UnknownKind(address.path(), str(address.kind))


def read_resource_uri(db_service: DatabaseService, uri: str) -> str:
    """Parse a resource URI, read it and render the rows as JSON text.

    The URI is parsed before any connection is borrowed, so a bad address
    never touches the pool.
    """
    address = parse_resource_uri(uri)
    logger.debug(f"Reading resource {uri} as {address!r}")
    return to_json(read_resource(db_service, address))
