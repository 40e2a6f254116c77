"""Resource addressing for warehouse metadata.

A resource address is one of two shapes:

- ``SchemaListing``: ``<scheme>://<host>/schema/<name>``
- ``TableResource``: ``<scheme>://<host>/<schema>/<table>/<kind>``

where ``kind`` is one of ``schema``, ``sample`` or ``statistics``. Path
segments are percent-encoded, so any schema or table name survives a
round trip through its URI.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union
from urllib.parse import quote, unquote, urlsplit

from redshift_mcp.models.error_types import InvalidAddress, UnknownKind

SCHEMA_LISTING_PREFIX = "schema"


class ResourceKind(str, Enum):
    """Kinds of per-table resources."""

    SCHEMA = "schema"
    SAMPLE = "sample"
    STATISTICS = "statistics"


@dataclass(frozen=True)
class SchemaListing:
    """Address of the table listing for one schema."""

    schema_name: str

    def path(self) -> str:
        return f"{SCHEMA_LISTING_PREFIX}/{_encode(self.schema_name)}"


@dataclass(frozen=True)
class TableResource:
    """Address of one kind of resource for a single table."""

    schema_name: str
    table_name: str
    kind: ResourceKind

    def path(self) -> str:
        return f"{_encode(self.schema_name)}/{_encode(self.table_name)}/{self.kind.value}"


ResourceAddress = Union[SchemaListing, TableResource]


def _encode(segment: str) -> str:
    return quote(segment, safe="")


def build_resource_uri(base_url: str, address: ResourceAddress) -> str:
    """Render an address as a URI under ``base_url``.

    Args:
        base_url: Credential-free base such as ``redshift://host:5439/``

    Returns:
        Absolute resource URI
    """
    return base_url.rstrip("/") + "/" + address.path()


def _split_path(uri: str, path: str) -> List[str]:
    if not path.startswith("/"):
        raise InvalidAddress(uri)
    segments = path[1:].split("/")
    if any(segment == "" for segment in segments):
        raise InvalidAddress(uri)
    return [unquote(segment) for segment in segments]


def parse_resource_uri(uri: str) -> ResourceAddress:
    """Parse a resource URI into its address.

    Args:
        uri: Resource URI as sent by the client

    Returns:
        SchemaListing or TableResource

    Raises:
        InvalidAddress: If the URI has no host or its path has the wrong shape
        UnknownKind: If a table resource names an unrecognised kind
    """
    parts = urlsplit(str(uri))
    if not parts.scheme or not parts.hostname:
        raise InvalidAddress(uri)

    # The raw path keeps percent-escapes so an encoded "/" is not a separator
    segments = _split_path(uri, parts.path)

    if len(segments) == 2:
        prefix, schema_name = segments
        if prefix != SCHEMA_LISTING_PREFIX:
            raise InvalidAddress(uri)
        return SchemaListing(schema_name)

    if len(segments) == 3:
        schema_name, table_name, kind = segments
        try:
            resource_kind = ResourceKind(kind)
        except ValueError:
            raise UnknownKind(uri, kind)
        return TableResource(schema_name, table_name, resource_kind)

    raise InvalidAddress(uri)
