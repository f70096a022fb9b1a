"""Bulk operation result schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.connection import SlotConflictSchema


class BulkFailureSchema(BaseModel):
    """One item of a bulk operation that was skipped."""

    part_id: int = Field(json_schema_extra={"example": 5})
    message: str = Field(json_schema_extra={"example": "Cannot disconnect part 5 because it is not connected to any motherboard"})

    model_config = ConfigDict(from_attributes=True)


class BulkResultSchema(BaseModel):
    """Tally of a bulk operation; items succeed or fail independently."""

    success_count: int = Field(json_schema_extra={"example": 2})
    failure_count: int = Field(json_schema_extra={"example": 1})
    failures: list[BulkFailureSchema] = Field(default_factory=list)
    conflicts: list[SlotConflictSchema] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
