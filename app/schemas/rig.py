"""Rig, lifecycle and rig name schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.connection import ConnectionResponseSchema
from app.schemas.date import PartialDateSchema
from app.schemas.part import PartSummarySchema
from app.utils.partial_date import DatePrecision


class LifecycleSchema(BaseModel):
    """One computed period during which a motherboard hosted parts."""

    sequence: int = Field(json_schema_extra={"example": 1})
    start_date: str = Field(json_schema_extra={"example": "2021-06-01"})
    start_precision: DatePrecision = Field(json_schema_extra={"example": "month"})
    end_date: str | None = Field(default=None, json_schema_extra={"example": "2022-01-01"})
    end_precision: DatePrecision | None = Field(default=None, json_schema_extra={"example": "month"})
    active: bool = Field(json_schema_extra={"example": False})
    name: str | None = Field(default=None, description="Resolved rig name", json_schema_extra={"example": "Gaming Rig"})

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_lifecycle(cls, lifecycle, name: str | None = None) -> "LifecycleSchema":  # type: ignore[no-untyped-def]
        return cls.model_validate(lifecycle).model_copy(update={"name": name})


class LifecycleSummarySchema(BaseModel):
    """Statistics for one lifecycle."""

    lifecycle: LifecycleSchema
    duration_days: int = Field(json_schema_extra={"example": 214})
    unique_components: int = Field(json_schema_extra={"example": 6})
    connection_count: int = Field(json_schema_extra={"example": 7})
    counts_by_type: dict[str, int] = Field(json_schema_extra={"example": {"cpu": 1, "ram": 2}})

    model_config = ConfigDict(from_attributes=True)


class RigNameRequestSchema(BaseModel):
    """Schema for naming the lifecycle starting on a given date."""

    start_date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Exact start date of a computed lifecycle",
        json_schema_extra={"example": "2021-06-01"}
    )
    name: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "Gaming Rig"})
    notes: str = Field("", json_schema_extra={"example": ""})


class RigNameResponseSchema(BaseModel):
    id: int = Field(json_schema_extra={"example": 1})
    motherboard_id: int = Field(json_schema_extra={"example": 1})
    start_date: str = Field(json_schema_extra={"example": "2021-06-01"})
    name: str = Field(json_schema_extra={"example": "Gaming Rig"})
    notes: str = Field(json_schema_extra={"example": ""})

    model_config = ConfigDict(from_attributes=True)


class RigIdentityRequestSchema(BaseModel):
    """Schema for starting an interval based rig identity."""

    name: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "Media Server"})
    active_from: PartialDateSchema = Field(..., json_schema_extra={"example": {"year": 2022, "month": 2}})
    notes: str = Field("", json_schema_extra={"example": ""})


class RigIdentityResponseSchema(BaseModel):
    id: int = Field(json_schema_extra={"example": 1})
    motherboard_id: int = Field(json_schema_extra={"example": 1})
    name: str = Field(json_schema_extra={"example": "Media Server"})
    active_from: str = Field(json_schema_extra={"example": "2022-02-01"})
    active_from_precision: DatePrecision = Field(json_schema_extra={"example": "month"})
    active_until: str | None = Field(default=None, json_schema_extra={"example": None})
    active_until_precision: DatePrecision | None = Field(default=None, json_schema_extra={"example": None})
    notes: str = Field(json_schema_extra={"example": ""})

    model_config = ConfigDict(from_attributes=True)


class RigSummarySchema(BaseModel):
    """A motherboard in the active or historical rig listing."""

    motherboard: PartSummarySchema
    rig_name: str | None = Field(default=None, json_schema_extra={"example": "Gaming Rig"})
    connected_parts: int = Field(default=0, json_schema_extra={"example": 5})
    lifecycle: LifecycleSchema | None = None
    last_disconnected_at: str | None = Field(default=None, json_schema_extra={"example": None})

    @classmethod
    def from_summary(cls, summary) -> "RigSummarySchema":  # type: ignore[no-untyped-def]
        return cls(
            motherboard=PartSummarySchema.model_validate(summary.motherboard),
            rig_name=summary.rig_name,
            connected_parts=summary.connected_parts,
            lifecycle=LifecycleSchema.from_lifecycle(summary.lifecycle, summary.rig_name) if summary.lifecycle else None,
            last_disconnected_at=summary.last_disconnected_at,
        )


class RigDetailsSchema(BaseModel):
    """A motherboard with its current parts and full lifecycle history."""

    motherboard: PartSummarySchema
    rig_name: str | None = Field(default=None, json_schema_extra={"example": "Gaming Rig"})
    current_identity: RigIdentityResponseSchema | None = None
    active_connections: list[ConnectionResponseSchema] = Field(default_factory=list)
    lifecycles: list[LifecycleSchema] = Field(default_factory=list)

    @classmethod
    def from_details(cls, details) -> "RigDetailsSchema":  # type: ignore[no-untyped-def]
        return cls(
            motherboard=PartSummarySchema.model_validate(details.motherboard),
            rig_name=details.rig_name,
            current_identity=(
                RigIdentityResponseSchema.model_validate(details.current_identity)
                if details.current_identity else None
            ),
            active_connections=[
                ConnectionResponseSchema.model_validate(connection)
                for connection in details.active_connections
            ],
            lifecycles=[
                LifecycleSchema.from_lifecycle(lifecycle, name)
                for lifecycle, name in details.lifecycles
            ],
        )
