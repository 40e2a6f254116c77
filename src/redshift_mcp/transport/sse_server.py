"""Server-Sent Events (SSE) transport for MCP server."""

import uvicorn
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from redshift_mcp.lib.logging_config import get_logger

logger = get_logger(__name__)


class SSETransport:
    """MCP server transport using Server-Sent Events over HTTP.

    Clients open ``GET /sse`` for the event stream and post JSON-RPC
    messages to ``/messages/``.
    """

    def __init__(self, server: Server, host: str = "0.0.0.0", port: int = 3000):
        """Initialize SSE transport.

        Args:
            server: MCP server with registered handlers
            host: Host to bind the server to
            port: Port to bind the server to
        """
        self.server = server
        self.host = host
        self.port = port
        self.sse = SseServerTransport("/messages/")
        self.app = self._build_app()

    def _build_app(self) -> Starlette:
        """Set up Starlette routes for the SSE transport."""

        async def handle_sse(request: Request):
            async with self.sse.connect_sse(
                request.scope, request.receive, request._send
            ) as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options()
                )
            return Response()

        async def root(request: Request):
            return JSONResponse({"status": "MCP SSE Server Running", "transport": "sse"})

        return Starlette(routes=[
            Route("/", endpoint=root),
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=self.sse.handle_post_message),
        ])

    def run(self):
        """Run the SSE server."""
        logger.info(f"Starting MCP server in SSE mode on {self.host}:{self.port}")

        try:
            uvicorn.run(self.app, host=self.host, port=self.port, log_level="info")
        except KeyboardInterrupt:
            logger.info("SSE server shutdown requested")
