"""Query tool: client SQL under the read-only transaction wrapper."""

import time
from typing import Any, Dict, List

from redshift_mcp.lib.logging_config import get_logger
from redshift_mcp.services.database_service import DatabaseService

logger = get_logger(__name__)


def execute_query(db_service: DatabaseService, sql: str) -> List[Dict[str, Any]]:
    """Run client SQL verbatim inside a read-only, always rolled back transaction.

    The SQL text is not parsed or rewritten. The engine's read-only mode
    is what rejects writes; statements that read-only mode does not cover
    are a known limitation of this tool.

    Args:
        db_service: Database service instance
        sql: SQL text from the client

    Returns:
        Result rows

    Raises:
        EngineError: If the engine rejects or fails the statement
    """
    logger.info(f"Executing query: {sql[:100]}{'...' if len(sql) > 100 else ''}")
    start_time = time.time()

    rows = db_service.execute_readonly_query(sql)

    execution_time = (time.time() - start_time) * 1000
    logger.info(f"Query executed successfully, returned {len(rows)} rows in {execution_time:.2f}ms")
    return rows
