"""Integration tests for the MCP request handlers.

Requests are pushed through the low-level server's registered handlers,
so these tests cover the same path a stdio or SSE client takes after the
transport has decoded a message.
"""

import json
from importlib.metadata import version
from unittest.mock import MagicMock, patch

import mcp.types as types
import pytest
from starlette.testclient import TestClient

from redshift_mcp.cli.mcp_server import build_parser, create_server, main
from redshift_mcp.models.error_types import (
    ConfigError,
    ConnectionError,
    EngineError,
    InvalidAddress,
    UnknownKind
)
from redshift_mcp.transport import SSETransport, StdioTransport

BASE = "redshift://cluster.example.com:5439/"


@pytest.fixture
def mock_db():
    mock = MagicMock()
    mock.execute_readonly_query.return_value = [{'answer': 42}]
    return mock


@pytest.fixture
def server(mock_db):
    return create_server(mock_db, BASE)


async def call_tool(server, name, arguments):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments)
    )
    return (await handler(request)).root


class TestServerHandlers:
    """Resource and tool handlers registered by create_server."""

    def test_all_handlers_registered(self, server):
        for request_type in (
            types.ListResourcesRequest,
            types.ReadResourceRequest,
            types.ListToolsRequest,
            types.CallToolRequest,
        ):
            assert request_type in server.request_handlers

    def test_sdk_is_1x(self):
        # The decorator API used by create_server is the 1.x low-level server
        assert version('mcp').split('.')[0] == '1'

    @pytest.mark.asyncio
    async def test_list_tools(self, server):
        handler = server.request_handlers[types.ListToolsRequest]

        result = (await handler(types.ListToolsRequest(method="tools/list"))).root

        assert [tool.name for tool in result.tools] == ['query', 'describe_table', 'find_column']
        assert result.tools[1].inputSchema['required'] == ['schema', 'table']

    @pytest.mark.asyncio
    async def test_list_resources(self, server, mock_db):
        mock_db.run_query.side_effect = [
            [{'schema_name': 'public'}],
            [{'table_name': 'orders'}],
        ]
        handler = server.request_handlers[types.ListResourcesRequest]

        result = (await handler(types.ListResourcesRequest(method="resources/list"))).root

        assert [str(resource.uri) for resource in result.resources] == [
            "redshift://cluster.example.com:5439/schema/public",
            "redshift://cluster.example.com:5439/public/orders/schema",
            "redshift://cluster.example.com:5439/public/orders/sample",
            "redshift://cluster.example.com:5439/public/orders/statistics",
        ]
        assert all(resource.mimeType == "application/json" for resource in result.resources)

    @pytest.mark.asyncio
    async def test_read_resource(self, server, mock_db):
        mock_db.execute_query.return_value = [{'id': 1, 'email': 'ann@example.com'}]
        handler = server.request_handlers[types.ReadResourceRequest]
        request = types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri=f"{BASE}public/users/sample")
        )

        result = (await handler(request)).root

        assert result.contents[0].mimeType == "application/json"
        assert json.loads(result.contents[0].text) == [{'id': 1, 'email': 'REDACTED'}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path, error", [
        ("public/users/indexes", UnknownKind),
        ("public/users/sample/extra", InvalidAddress),
    ])
    async def test_read_resource_bad_address(self, server, mock_db, path, error):
        handler = server.request_handlers[types.ReadResourceRequest]
        request = types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri=f"{BASE}{path}")
        )

        with pytest.raises(error):
            await handler(request)

        mock_db.execute_query.assert_not_called()

    @pytest.mark.asyncio
    async def test_call_tool_success(self, server, mock_db):
        result = await call_tool(server, 'query', {'sql': 'SELECT 42 AS answer'})

        assert result.isError is False
        assert json.loads(result.content[0].text) == [{'answer': 42}]
        mock_db.execute_readonly_query.assert_called_once_with('SELECT 42 AS answer')

    @pytest.mark.asyncio
    async def test_call_tool_engine_error(self, server, mock_db):
        mock_db.execute_readonly_query.side_effect = EngineError("SQL syntax error: near SELEC")

        result = await call_tool(server, 'query', {'sql': 'SELEC 1'})

        assert result.isError is True
        assert result.content[0].text == "Error executing query: SQL syntax error: near SELEC"

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, server):
        result = await call_tool(server, 'drop_table', {})

        assert result.isError is True
        assert "drop_table" in result.content[0].text


class TestTransports:
    """Transport construction and command line options."""

    def test_sse_app_routes(self, server):
        transport = SSETransport(server, host="127.0.0.1", port=3999)
        client = TestClient(transport.app)

        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["transport"] == "sse"

    def test_stdio_transport_holds_server(self, server):
        assert StdioTransport(server).server is server

    def test_parser_defaults(self):
        args = build_parser().parse_args([])

        assert args.transport == "stdio"
        assert args.port == 3000
        assert args.health_port == 8080
        assert args.no_health_api is False

    def test_parser_rejects_unknown_transport(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--transport", "websocket"])


class TestMain:
    """Startup failures and shutdown."""

    @patch('redshift_mcp.cli.mcp_server.configure_from_env')
    @patch('redshift_mcp.cli.mcp_server.DatabaseConfig')
    def test_config_error_exits_1(self, mock_config, mock_logging):
        mock_config.side_effect = ConfigError("DATABASE_URL environment variable is not set")

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

    @patch('redshift_mcp.cli.mcp_server.configure_from_env')
    @patch('redshift_mcp.cli.mcp_server.DatabaseService')
    @patch('redshift_mcp.cli.mcp_server.DatabaseConfig')
    def test_pool_failure_exits_1(self, mock_config, mock_service_class, mock_logging):
        mock_service_class.return_value.connect.side_effect = ConnectionError("could not connect")

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

    @patch('redshift_mcp.cli.mcp_server.signal.signal')
    @patch('redshift_mcp.cli.mcp_server.StdioTransport')
    @patch('redshift_mcp.cli.mcp_server.configure_from_env')
    @patch('redshift_mcp.cli.mcp_server.DatabaseService')
    @patch('redshift_mcp.cli.mcp_server.DatabaseConfig')
    def test_clean_run_closes_pool(self, mock_config, mock_service_class, mock_logging,
                                   mock_transport, mock_signal):
        mock_config.return_value.resource_base_url = BASE

        with pytest.raises(SystemExit) as exc_info:
            main(["--no-health-api"])

        assert exc_info.value.code == 0
        mock_transport.return_value.run.assert_called_once()
        mock_service_class.return_value.close.assert_called_once()

    @patch('redshift_mcp.cli.mcp_server.signal.signal')
    @patch('redshift_mcp.cli.mcp_server.StdioTransport')
    @patch('redshift_mcp.cli.mcp_server.configure_from_env')
    @patch('redshift_mcp.cli.mcp_server.DatabaseService')
    @patch('redshift_mcp.cli.mcp_server.DatabaseConfig')
    def test_transport_failure_exits_1_and_closes_pool(self, mock_config, mock_service_class,
                                                       mock_logging, mock_transport, mock_signal):
        mock_config.return_value.resource_base_url = BASE
        mock_transport.return_value.run.side_effect = RuntimeError("stdin closed")

        with pytest.raises(SystemExit) as exc_info:
            main(["--no-health-api"])

        assert exc_info.value.code == 1
        mock_service_class.return_value.close.assert_called_once()
