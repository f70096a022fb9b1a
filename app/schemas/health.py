"""Health check schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Probe status", json_schema_extra={"example": "ready"})
    ready: bool = Field(json_schema_extra={"example": True})
