"""Timeline schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.services.timeline_service import TimelineEventKind
from app.utils.partial_date import DatePrecision


class TimelineEventSchema(BaseModel):
    """One projected event of a part timeline."""

    date: str | None = Field(json_schema_extra={"example": "2021-06-01"})
    precision: DatePrecision | None = Field(json_schema_extra={"example": "month"})
    kind: TimelineEventKind = Field(json_schema_extra={"example": "connected"})
    title: str = Field(json_schema_extra={"example": "Connected to Motherboard"})
    content: str = Field(json_schema_extra={"example": 'Connected to ASUS ROG STRIX B550-F (Part of "Gaming Rig" rig)'})
    notes: str = Field(json_schema_extra={"example": ""})
    source_id: int = Field(
        description="Id of the part, connection or disposal the event comes from",
        json_schema_extra={"example": 12}
    )

    model_config = ConfigDict(from_attributes=True)
