"""Connection schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.part import PartType
from app.schemas.date import PartialDateSchema
from app.schemas.part import PartSummarySchema
from app.utils.partial_date import DatePrecision


class ConnectRequestSchema(BaseModel):
    """Schema for connecting a part to a motherboard."""

    part_id: int = Field(..., description="Part to connect", json_schema_extra={"example": 4})
    motherboard_id: int = Field(..., description="Motherboard hosting the part", json_schema_extra={"example": 1})
    connected: PartialDateSchema | None = Field(
        None,
        description="Connection date; defaults to the part's acquisition date",
        json_schema_extra={"example": {"year": 2021, "month": 6}}
    )
    notes: str = Field("", json_schema_extra={"example": "Upgrade from stock cooler"})
    keep_existing: bool = Field(
        False,
        description="Leave parts of the same type connected instead of displacing them",
        json_schema_extra={"example": False}
    )


class DisconnectRequestSchema(BaseModel):
    """Schema for closing a connection."""

    disconnected: PartialDateSchema = Field(
        ...,
        description="Disconnect date; a year is required",
        json_schema_extra={"example": {"year": 2022, "month": 1}}
    )
    notes: str = Field("", json_schema_extra={"example": "Moved to the media server"})


class BulkConnectRequestSchema(BaseModel):
    """Schema for connecting several parts to one motherboard."""

    part_ids: list[int] = Field(..., min_length=1, json_schema_extra={"example": [4, 5, 6]})
    motherboard_id: int = Field(..., json_schema_extra={"example": 1})
    connected: PartialDateSchema | None = Field(None, json_schema_extra={"example": {"year": 2021}})
    notes: str = Field("", json_schema_extra={"example": ""})
    keep_existing_types: list[PartType] = Field(
        default_factory=list,
        description="Part types whose current occupants stay connected",
        json_schema_extra={"example": ["ram", "storage"]}
    )


class BulkDisconnectRequestSchema(BaseModel):
    """Schema for disconnecting several parts at once."""

    part_ids: list[int] = Field(..., min_length=1, json_schema_extra={"example": [4, 5]})
    disconnected: PartialDateSchema = Field(..., json_schema_extra={"example": {"year": 2022}})
    notes: str = Field("", json_schema_extra={"example": ""})


class ConnectionResponseSchema(BaseModel):
    """Schema for a connection interval."""

    id: int = Field(json_schema_extra={"example": 12})
    motherboard_id: int = Field(json_schema_extra={"example": 1})
    part_id: int = Field(json_schema_extra={"example": 4})
    connected_at: str = Field(json_schema_extra={"example": "2021-06-01"})
    connected_precision: DatePrecision = Field(json_schema_extra={"example": "month"})
    disconnected_at: str | None = Field(json_schema_extra={"example": None})
    disconnected_precision: DatePrecision | None = Field(json_schema_extra={"example": None})
    notes: str = Field(json_schema_extra={"example": ""})
    is_open: bool = Field(description="True while the part is still connected", json_schema_extra={"example": True})
    part: PartSummarySchema
    motherboard: PartSummarySchema
    created_at: datetime = Field(json_schema_extra={"example": "2024-01-15T10:30:00Z"})

    model_config = ConfigDict(from_attributes=True)


class SlotConflictSchema(BaseModel):
    """Same-type occupants met by a connect."""

    motherboard_id: int = Field(json_schema_extra={"example": 1})
    part_type: PartType = Field(json_schema_extra={"example": "cpu"})
    connection_ids: list[int] = Field(description="Conflicting open connections", json_schema_extra={"example": [9]})
    part_ids: list[int] = Field(description="Parts occupying the slot", json_schema_extra={"example": [3]})
    kept: bool = Field(description="True when the occupants were left connected", json_schema_extra={"example": False})
    has_conflicts: bool = Field(json_schema_extra={"example": True})

    model_config = ConfigDict(from_attributes=True)


class ConnectResponseSchema(BaseModel):
    """The created connection and the conflicts resolved on the way."""

    connection: ConnectionResponseSchema
    conflicts: SlotConflictSchema

    model_config = ConfigDict(from_attributes=True)


class ConflictPreviewQuerySchema(BaseModel):
    """Query parameters of the conflict preview."""

    part_id: int = Field(..., json_schema_extra={"example": 4})
    motherboard_id: int = Field(..., json_schema_extra={"example": 1})


class ActiveQuerySchema(BaseModel):
    """Restrict a connection listing to open connections."""

    active: bool = Field(False, json_schema_extra={"example": True})
