"""
Common response schemas for consistent API structure.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format."""
    model_config = ConfigDict(from_attributes=True)

    error: str = Field(..., description="Error message", json_schema_extra={"example": "Cannot connect part 4 to part 1 because it is already connected to motherboard 2"})
    details: dict[str, Any] | list[Any] | str | None = Field(None, description="Additional error details", json_schema_extra={"example": {"message": "The requested operation cannot be performed"}})


class DeletedCountSchema(BaseModel):
    """Number of records removed by a bulk delete."""

    deleted: int = Field(..., description="Number of records removed", json_schema_extra={"example": 2})
