"""MCP Tools Orchestration Layer.

Single entry point for tool calls. The set of tools is closed: each name in
``ToolName`` has a definition in ``TOOL_DEFINITIONS`` and a branch in
``invoke``. Tool implementations live in the tools package:

- tools/query.py: read-only execution of client SQL
- tools/table.py: describe_table and find_column
- tools/resources.py: resource reads (not exposed as tools)

Every call returns a ``ToolResult``. Engine failures, bad arguments and
unknown tool names all come back as ``isError`` results; nothing raised by
a tool escapes ``invoke``.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from redshift_mcp.lib.logging_config import get_logger
from redshift_mcp.lib.tools.query import execute_query
from redshift_mcp.lib.tools.table import describe_table, find_column
from redshift_mcp.models.error_types import MCPError
from redshift_mcp.models.tool_responses import ToolResult
from redshift_mcp.services.database_service import DatabaseService
from redshift_mcp.services.query_utils import to_json

logger = get_logger(__name__)


class ToolName(str, Enum):
    """Names of the tools this server exposes."""

    QUERY = "query"
    DESCRIBE_TABLE = "describe_table"
    FIND_COLUMN = "find_column"


TOOL_DEFINITIONS: Dict[ToolName, Dict[str, Any]] = {
    ToolName.QUERY: {
        'description': "Run a read-only SQL query against Redshift",
        'properties': {'sql': {'type': 'string'}},
        'required': ['sql'],
    },
    ToolName.DESCRIBE_TABLE: {
        'description': "Get detailed information about a specific table",
        'properties': {'schema': {'type': 'string'}, 'table': {'type': 'string'}},
        'required': ['schema', 'table'],
    },
    ToolName.FIND_COLUMN: {
        'description': "Find tables containing columns with specific name patterns",
        'properties': {'pattern': {'type': 'string'}},
        'required': ['pattern'],
    },
}

# Message prefix for engine failures, per tool
ERROR_PREFIXES = {
    ToolName.QUERY: "Error executing query",
    ToolName.DESCRIBE_TABLE: "Error describing table",
    ToolName.FIND_COLUMN: "Error finding columns",
}


def list_tools() -> List[Dict[str, Any]]:
    """Describe every tool with its JSON input schema."""
    return [
        {
            'name': name.value,
            'description': definition['description'],
            'inputSchema': {
                'type': 'object',
                'properties': definition['properties'],
                'required': list(definition['required']),
            },
        }
        for name, definition in TOOL_DEFINITIONS.items()
    ]


def validate_arguments(tool: ToolName, arguments: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Check the required string arguments of a tool.

    Returns:
        An error message, or None when the arguments are acceptable
    """
    arguments = arguments or {}
    required = TOOL_DEFINITIONS[tool]['required']

    missing = [name for name in required if name not in arguments or arguments[name] is None]
    if missing:
        return f"Missing required argument(s) for tool '{tool.value}': {', '.join(missing)}"

    wrong_type = [name for name in required if not isinstance(arguments[name], str)]
    if wrong_type:
        return f"Argument(s) for tool '{tool.value}' must be strings: {', '.join(wrong_type)}"
    return None


def invoke(db_service: DatabaseService, tool_name: str,
           arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
    """Invoke a tool by name.

    Args:
        db_service: Database service instance
        tool_name: One of the ``ToolName`` values
        arguments: Tool arguments

    Returns:
        ToolResult whose text is JSON on success or a message on error
    """
    try:
        tool = ToolName(tool_name)
    except ValueError:
        logger.warning(f"Unknown tool requested: {tool_name}")
        return ToolResult.error(f"Unknown tool: {tool_name}")

    problem = validate_arguments(tool, arguments)
    if problem:
        logger.warning(problem)
        return ToolResult.error(problem)

    try:
        payload = _dispatch(db_service, tool, arguments)
    except MCPError as e:
        logger.error(f"MCP error in {tool.value}: {e.message}")
        return ToolResult.error(f"{ERROR_PREFIXES[tool]}: {e.message}")
    except Exception as e:
        logger.exception(f"Unexpected error in {tool.value}")
        return ToolResult.error(f"{ERROR_PREFIXES[tool]}: Unexpected error: {str(e)}")

    return ToolResult.success(to_json(payload))


def _dispatch(db_service: DatabaseService, tool: ToolName, arguments: Mapping[str, Any]) -> Any:
    if tool is ToolName.QUERY:
        return execute_query(db_service, arguments['sql'])
    elif tool is ToolName.DESCRIBE_TABLE:
        return describe_table(db_service, arguments['schema'], arguments['table'])
    elif tool is ToolName.FIND_COLUMN:
        return find_column(db_service, arguments['pattern'])
    raise MCPError(f"Tool has no implementation: {tool.value}", recoverable=False)
