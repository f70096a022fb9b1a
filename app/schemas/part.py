"""Part schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.models.part import PartStatus, PartType
from app.schemas.date import PartialDateResponseSchema, PartialDateSchema
from app.utils.partial_date import DatePrecision


class PartCreateSchema(BaseModel):
    """Schema for creating a new part."""

    brand: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Manufacturer or brand name",
        json_schema_extra={"example": "ASUS"}
    )
    model: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Model name or number",
        json_schema_extra={"example": "ROG STRIX B550-F"}
    )
    type: PartType = Field(
        ...,
        description="Kind of component",
        json_schema_extra={"example": "motherboard"}
    )
    acquired: PartialDateSchema | None = Field(
        None,
        description="Acquisition date, known to the year, month or day",
        json_schema_extra={"example": {"year": 2021, "month": 6}}
    )
    notes: str = Field(
        "",
        description="Free-form notes",
        json_schema_extra={"example": "Bought second hand"}
    )


class PartUpdateSchema(PartCreateSchema):
    """Schema for updating an existing part. All editable fields are replaced."""


class PartSummarySchema(BaseModel):
    """Lightweight part reference embedded in other responses."""

    id: int = Field(json_schema_extra={"example": 1})
    brand: str = Field(json_schema_extra={"example": "ASUS"})
    model: str = Field(json_schema_extra={"example": "ROG STRIX B550-F"})
    type: PartType = Field(json_schema_extra={"example": "motherboard"})
    is_deleted: bool = Field(default=False, json_schema_extra={"example": False})

    model_config = ConfigDict(from_attributes=True)


class PartResponseSchema(BaseModel):
    """Schema for full part details."""

    id: int = Field(
        description="Surrogate part identifier",
        json_schema_extra={"example": 1}
    )
    brand: str = Field(json_schema_extra={"example": "ASUS"})
    model: str = Field(json_schema_extra={"example": "ROG STRIX B550-F"})
    type: PartType = Field(json_schema_extra={"example": "motherboard"})
    acquisition_date: str | None = Field(
        description="Stored acquisition date; unknown components are padded with 01",
        json_schema_extra={"example": "2021-06-01"}
    )
    date_precision: DatePrecision | None = Field(
        description="Precision of the acquisition date",
        json_schema_extra={"example": "month"}
    )
    notes: str = Field(json_schema_extra={"example": ""})
    is_deleted: bool = Field(
        description="True once the part has been disposed or deleted",
        json_schema_extra={"example": False}
    )
    created_at: datetime = Field(json_schema_extra={"example": "2024-01-15T10:30:00Z"})
    updated_at: datetime = Field(json_schema_extra={"example": "2024-01-15T14:45:00Z"})

    @computed_field  # type: ignore[prop-decorator]
    @property
    def acquired(self) -> PartialDateResponseSchema | None:
        """Acquisition date with only the components its precision defines."""
        return PartialDateResponseSchema.from_stored(self.acquisition_date, self.date_precision)

    model_config = ConfigDict(from_attributes=True)


class PartListItemSchema(PartResponseSchema):
    """Part with its derived status, as returned by listings."""

    status: PartStatus = Field(
        description="Derived status: active, bin or deleted",
        json_schema_extra={"example": "active"}
    )
    active_connections: int = Field(
        description="Number of open connections where the part is the relevant endpoint",
        json_schema_extra={"example": 4}
    )
    rig_name: str | None = Field(
        default=None,
        description="Current rig name, for motherboards hosting parts",
        json_schema_extra={"example": "Gaming Rig"}
    )

    @classmethod
    def from_listing(cls, listing) -> "PartListItemSchema":  # type: ignore[no-untyped-def]
        base = PartResponseSchema.model_validate(listing.part)
        return cls(
            **base.model_dump(exclude={"acquired"}),
            status=listing.status,
            active_connections=listing.active_connections,
            rig_name=listing.rig_name,
        )


class BrandListSchema(BaseModel):
    """Distinct brands in use."""

    brands: list[str] = Field(json_schema_extra={"example": ["AMD", "ASUS", "Corsair"]})


class PartListQuerySchema(BaseModel):
    """Query parameters supported by the part listing."""

    type: str | None = Field(
        default=None,
        description="Part type, or 'all'",
        json_schema_extra={"example": "cpu"}
    )
    status: str | None = Field(
        default=None,
        description="active, bin, deleted or all",
        json_schema_extra={"example": "bin"}
    )
    search: str | None = Field(
        default=None,
        max_length=255,
        description="Case-insensitive match on brand, model or notes",
        json_schema_extra={"example": "ryzen"}
    )
    sort: str = Field(
        default="id",
        description="id, brand, model, type, acquisition_date or status",
        json_schema_extra={"example": "brand"}
    )
    direction: str = Field(default="asc", json_schema_extra={"example": "desc"})


class PartBinQuerySchema(BaseModel):
    """Query parameters supported by the parts bin."""

    type: str | None = Field(default=None, json_schema_extra={"example": "gpu"})
