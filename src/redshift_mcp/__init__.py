"""Redshift MCP Server - warehouse metadata and read-only queries over MCP."""

__version__ = "0.1.0"
