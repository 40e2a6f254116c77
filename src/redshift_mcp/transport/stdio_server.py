"""Standard I/O transport for MCP server."""

import anyio
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from redshift_mcp.lib.logging_config import get_logger

logger = get_logger(__name__)


class StdioTransport:
    """MCP server transport using standard input/output."""

    def __init__(self, server: Server):
        """Initialize stdio transport.

        Args:
            server: MCP server with registered handlers
        """
        self.server = server

    async def serve(self):
        """Serve JSON-RPC requests from stdin, writing responses to stdout."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )

    def run(self):
        """Run the stdio transport until the client disconnects."""
        logger.info("Starting MCP server in stdio mode")

        try:
            anyio.run(self.serve)
        except KeyboardInterrupt:
            logger.info("Stdio server shutdown requested")
