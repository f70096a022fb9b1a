"""Pydantic schemas for request/response validation."""

# Import all schemas here for easy access
from app.schemas.connection import (
    ConnectionResponseSchema,
    ConnectRequestSchema,
    DisconnectRequestSchema,
)
from app.schemas.date import PartialDateResponseSchema, PartialDateSchema
from app.schemas.disposal import DisposalResponseSchema, DisposeRequestSchema
from app.schemas.part import (
    PartCreateSchema,
    PartListItemSchema,
    PartResponseSchema,
    PartUpdateSchema,
)
from app.schemas.rig import LifecycleSchema, RigDetailsSchema, RigSummarySchema
from app.schemas.timeline import TimelineEventSchema

__all__: list[str] = [
    "ConnectionResponseSchema",
    "ConnectRequestSchema",
    "DisconnectRequestSchema",
    "PartialDateResponseSchema",
    "PartialDateSchema",
    "DisposalResponseSchema",
    "DisposeRequestSchema",
    "PartCreateSchema",
    "PartListItemSchema",
    "PartResponseSchema",
    "PartUpdateSchema",
    "LifecycleSchema",
    "RigDetailsSchema",
    "RigSummarySchema",
    "TimelineEventSchema",
]
