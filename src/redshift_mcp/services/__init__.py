"""Business logic services for Redshift MCP Server."""

from .database_service import DatabaseService
from .query_utils import quote_identifier, redact_rows, to_json
from .health_api import HealthAPI

__all__ = [
    'DatabaseService',
    'quote_identifier',
    'redact_rows',
    'to_json',
    'HealthAPI'
]
