"""Disposal schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.disposal import DisposalReason
from app.schemas.date import PartialDateSchema
from app.utils.partial_date import DatePrecision


class DisposeRequestSchema(BaseModel):
    """Schema for disposing of a part."""

    disposed: PartialDateSchema = Field(
        ...,
        description="Disposal date; a year is required",
        json_schema_extra={"example": {"year": 2023, "month": 3}}
    )
    reason: DisposalReason | None = Field(
        None,
        description="How the part left use; defaults to the configured reason",
        json_schema_extra={"example": "sold"}
    )
    recipient: str | None = Field(
        None,
        max_length=255,
        description="Buyer or recipient; required when sold, gifted or returned",
        json_schema_extra={"example": "A colleague"}
    )
    price: str | None = Field(
        None,
        max_length=50,
        description="Sale price, kept for sold parts only",
        json_schema_extra={"example": "120 EUR"}
    )
    notes: str = Field("", json_schema_extra={"example": ""})


class BulkDisposeRequestSchema(DisposeRequestSchema):
    """Schema for disposing several parts under one date and reason."""

    part_ids: list[int] = Field(..., min_length=1, json_schema_extra={"example": [4, 5]})


class DisposalResponseSchema(BaseModel):
    """Schema for a disposal record."""

    id: int = Field(json_schema_extra={"example": 3})
    part_id: int = Field(json_schema_extra={"example": 4})
    disposed_at: str = Field(json_schema_extra={"example": "2023-03-01"})
    disposed_precision: DatePrecision = Field(json_schema_extra={"example": "month"})
    reason: str = Field(json_schema_extra={"example": "sold"})
    recipient: str | None = Field(default=None, json_schema_extra={"example": "A colleague"})
    price: str | None = Field(default=None, json_schema_extra={"example": "120 EUR"})
    notes: str = Field(json_schema_extra={"example": ""})
    created_at: datetime = Field(json_schema_extra={"example": "2024-01-15T10:30:00Z"})

    model_config = ConfigDict(from_attributes=True)
