"""Pydantic models for resource and tool responses.

These models shape what leaves the server: resource descriptors, column
descriptors, table statistics and the uniform tool result envelope.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Resource listing
# ============================================================================

class ResourceDescriptor(BaseModel):
    """One addressable resource as shown in a resource listing."""

    uri: str = Field(..., description="Resource URI")
    name: str = Field(..., description="Human-readable resource name")
    mime_type: str = Field("application/json", description="Media type of the resource body")


# ============================================================================
# Table metadata
# ============================================================================

class ColumnDescriptor(BaseModel):
    """Column definition enriched with distribution and sort key flags."""

    column_name: str = Field(..., description="Column name")
    data_type: str = Field(..., description="Declared data type")
    character_maximum_length: Optional[int] = Field(None, ge=0)
    numeric_precision: Optional[int] = Field(None, ge=0)
    numeric_scale: Optional[int] = None
    is_nullable: bool = Field(..., description="Whether the column accepts NULL")
    ordinal_position: int = Field(..., ge=1)
    column_default: Optional[str] = None
    is_distkey: bool = Field(False, description="Column is the distribution key")
    is_sortkey: bool = Field(False, description="Column is part of the sort key")

    @field_validator('is_nullable', mode='before')
    @classmethod
    def parse_nullable(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().upper() == 'YES'
        return bool(value)

    @field_validator('is_distkey', mode='before')
    @classmethod
    def parse_distkey(cls, value: Any) -> bool:
        return bool(value)

    @classmethod
    def from_row(cls, row: dict) -> "ColumnDescriptor":
        """Build a descriptor from a catalog row.

        Any non-zero sort key order marks the column as a sort key.
        """
        data = dict(row)
        data['is_sortkey'] = bool(data.pop('sortkey_order', 0) or 0)
        return cls(**data)


class TableStatistics(BaseModel):
    """Storage and layout statistics for one table."""

    model_config = ConfigDict(populate_by_name=True)

    database: Optional[str] = None
    schema_name: Optional[str] = Field(None, alias='schema')
    table_id: Optional[int] = None
    table_name: Optional[str] = None
    total_size_mb: Optional[Decimal] = Field(None, description="Size in 1 MB blocks")
    percent_used: Optional[Decimal] = None
    row_count: Optional[Decimal] = None
    encoded: Optional[str] = None
    diststyle: Optional[str] = None
    sortkey1: Optional[str] = None
    max_varchar: Optional[int] = None
    create_time: Optional[datetime] = None


class TableDescription(BaseModel):
    """Merged column and statistics view returned by describe_table."""

    model_config = ConfigDict(populate_by_name=True)

    schema_name: str = Field(..., alias='schema')
    table: str
    columns: List[ColumnDescriptor]
    statistics: List[dict]


# ============================================================================
# Tool result envelope
# ============================================================================

class TextContent(BaseModel):
    """Text content block of a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform result of a tool invocation."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(False, alias='isError')

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=False)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=message)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)


