"""Catalog enumeration: the resource listing.

The listing is ordered schema, then table, then resource kind, so two calls
against an unchanged warehouse return identical lists.
"""

from typing import List

from redshift_mcp.lib.logging_config import get_logger
from redshift_mcp.lib.sql import SCHEMAS_QUERY, TABLES_QUERY
from redshift_mcp.models.resources import (
    ResourceKind,
    SchemaListing,
    TableResource,
    build_resource_uri
)
from redshift_mcp.models.tool_responses import ResourceDescriptor
from redshift_mcp.services.database_service import DatabaseService

logger = get_logger(__name__)

KIND_LABELS = {
    ResourceKind.SCHEMA: "Table Schema",
    ResourceKind.SAMPLE: "Sample Data",
    ResourceKind.STATISTICS: "Statistics",
}

# Per-table resources are always listed in this order
TABLE_RESOURCE_ORDER = (ResourceKind.SCHEMA, ResourceKind.SAMPLE, ResourceKind.STATISTICS)


def list_resources(db_service: DatabaseService, base_url: str) -> List[ResourceDescriptor]:
    """List every schema and, per table, its schema, sample and statistics resources.

    All queries run on one borrowed connection. Any query failure aborts
    the whole listing; partial listings are never returned.

    Args:
        db_service: Database service instance
        base_url: Credential-free base for resource URIs

    Returns:
        Ordered list of resource descriptors

    Raises:
        EngineError: If a catalog query fails
    """
    resources = []

    with db_service.cursor() as cursor:
        schemas = db_service.run_query(cursor, SCHEMAS_QUERY)

        for schema_row in schemas:
            schema_name = schema_row['schema_name']
            resources.append(ResourceDescriptor(
                uri=build_resource_uri(base_url, SchemaListing(schema_name)),
                name=f"Schema: {schema_name}"
            ))

            tables = db_service.run_query(cursor, TABLES_QUERY, (schema_name,))
            for table_row in tables:
                table_name = table_row['table_name']
                for kind in TABLE_RESOURCE_ORDER:
                    address = TableResource(schema_name, table_name, kind)
                    resources.append(ResourceDescriptor(
                        uri=build_resource_uri(base_url, address),
                        name=f"{KIND_LABELS[kind]}: {schema_name}.{table_name}"
                    ))

    logger.info(f"Listed {len(resources)} resources")
    return resources
