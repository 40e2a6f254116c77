#!/usr/bin/env python3
"""Run the Redshift MCP server from a source checkout.

Examples:
  # stdio transport, for desktop MCP clients
  python run.py stdio

  # SSE transport with the health API on its own port
  python run.py sse --port 3000 --health-port 8080

  # Debug logging, no health API
  LOG_LEVEL=DEBUG python run.py sse --no-health-api

Installed packages get the same entry point as ``redshift-mcp-server``.
"""

import os
import sys

# Import from src/ without installing
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src'))

from redshift_mcp.cli.mcp_server import main  # noqa: E402


def to_server_args(argv):
    """Accept the transport as a leading positional word."""
    if argv and argv[0] in ("stdio", "sse"):
        return ["--transport", argv[0]] + argv[1:]
    return argv


if __name__ == "__main__":
    main(to_server_args(sys.argv[1:]))
