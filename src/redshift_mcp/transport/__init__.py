"""Transport implementations for MCP server."""

from .stdio_server import StdioTransport
from .sse_server import SSETransport

__all__ = [
    'StdioTransport',
    'SSETransport'
]
