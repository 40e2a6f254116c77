"""MCP Tools Package - tool and resource implementations.

Structure:
- query.py: client SQL under the read-only transaction wrapper
- table.py: column descriptors, describe_table, find_column
- resources.py: resource reads by address
"""

from .query import execute_query
from .table import describe_table, find_column, fetch_columns
from .resources import read_resource, read_resource_uri

__all__ = [
    'execute_query',
    'describe_table',
    'find_column',
    'fetch_columns',
    'read_resource',
    'read_resource_uri'
]
