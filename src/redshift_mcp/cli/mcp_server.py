"""MCP server entry point for Redshift metadata and queries."""

import sys
import argparse
import asyncio
import threading
import signal
from typing import Any, Dict, List, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents

from redshift_mcp.lib.catalog import list_resources
from redshift_mcp.lib.logging_config import configure_from_env, get_logger
from redshift_mcp.lib.mcp_tools import invoke, list_tools
from redshift_mcp.lib.tools.resources import read_resource_uri
from redshift_mcp.models.config import DatabaseConfig
from redshift_mcp.models.error_types import ConfigError, ConnectionError, MCPError
from redshift_mcp.services.database_service import DatabaseService
from redshift_mcp.services.health_api import HealthAPI
from redshift_mcp.transport import SSETransport, StdioTransport

logger = get_logger(__name__)

SERVER_NAME = "redshift-mcp-server"

# Database service for the running process, set by main()
db_service: Optional[DatabaseService] = None


def create_server(service: DatabaseService, base_url: str) -> Server:
    """Build the MCP server and register its resource and tool handlers.

    Handlers run their blocking database work in worker threads so that
    concurrent requests each borrow their own pooled connection.

    Args:
        service: Connected database service
        base_url: Credential-free base for resource URIs

    Returns:
        Low-level MCP server ready to be run by a transport
    """
    server = Server(SERVER_NAME)

    @server.list_resources()
    async def handle_list_resources() -> List[types.Resource]:
        descriptors = await asyncio.to_thread(list_resources, service, base_url)
        return [
            types.Resource(uri=d.uri, name=d.name, mimeType=d.mime_type)
            for d in descriptors
        ]

    @server.read_resource()
    async def handle_read_resource(uri) -> List[ReadResourceContents]:
        text = await asyncio.to_thread(read_resource_uri, service, str(uri))
        return [ReadResourceContents(content=text, mime_type="application/json")]

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [types.Tool(**definition) for definition in list_tools()]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        result = await asyncio.to_thread(invoke, service, name, arguments)
        if result.is_error:
            # The SDK turns a raised handler error into an isError result
            raise MCPError(result.text)
        return [types.TextContent(type="text", text=block.text) for block in result.content]

    return server


def run_health_api(health_api: HealthAPI):
    """Run health API in a separate thread.

    Args:
        health_api: HealthAPI instance to run
    """
    try:
        health_api.run()
    except Exception as e:
        logger.error(f"Health API error: {e}")


def shutdown_handler(signum, frame):
    """Handle shutdown signals gracefully.

    Args:
        signum: Signal number
        frame: Current stack frame
    """
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    sys.exit(0)


def cleanup_resources():
    """Clean up all resources on shutdown."""
    logger.info("Cleaning up resources...")

    if db_service:
        try:
            db_service.close()
            logger.info("Database connections closed")
        except Exception as e:
            logger.error(f"Error closing database connections: {e}")

    logger.info("Cleanup complete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Redshift MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport mode: stdio (default) or sse"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host for SSE server and health API (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port for SSE server (default: 3000)"
    )
    parser.add_argument(
        "--health-port",
        type=int,
        default=8080,
        help="Port for health API (default: 8080)"
    )
    parser.add_argument(
        "--no-health-api",
        action="store_true",
        help="Disable health API service"
    )
    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the MCP server."""
    global db_service

    args = build_parser().parse_args(argv)

    configure_from_env()

    try:
        config = DatabaseConfig()
    except ConfigError as e:
        logger.error(f"Configuration error: {e.message}")
        sys.exit(1)

    db_service = DatabaseService(config.to_dict(), pool_size=config.pool_size)
    try:
        db_service.connect()
    except ConnectionError as e:
        logger.error(f"Failed to initialize database: {e.message}")
        sys.exit(1)

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    exit_code = 0
    try:
        server = create_server(db_service, config.resource_base_url)

        if not args.no_health_api:
            health_api = HealthAPI(
                db_service=db_service,
                host=args.host,
                port=args.health_port
            )
            health_thread = threading.Thread(
                target=run_health_api,
                args=(health_api,),
                daemon=True
            )
            health_thread.start()

        if args.transport == "stdio":
            StdioTransport(server).run()
        else:
            SSETransport(server, host=args.host, port=args.port).run()

    except KeyboardInterrupt:
        logger.info("Server shutdown requested via keyboard interrupt")
    except Exception as e:
        logger.error(f"Server error: {e}")
        exit_code = 1
    finally:
        cleanup_resources()

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
