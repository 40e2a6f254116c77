"""Data models for Redshift MCP Server."""

from .config import DatabaseConfig
from .error_types import (
    MCPError,
    ConfigError,
    AddressError,
    InvalidAddress,
    UnknownKind,
    EngineError,
    ConnectionError,
    RollbackWarning
)
from .resources import (
    ResourceKind,
    SchemaListing,
    TableResource,
    build_resource_uri,
    parse_resource_uri
)

__all__ = [
    'DatabaseConfig',
    'MCPError',
    'ConfigError',
    'AddressError',
    'InvalidAddress',
    'UnknownKind',
    'EngineError',
    'ConnectionError',
    'RollbackWarning',
    'ResourceKind',
    'SchemaListing',
    'TableResource',
    'build_resource_uri',
    'parse_resource_uri'
]
