"""SQLAlchemy models for the rig history tracker."""

# Import all models here for Alembic auto-generation
from app.models.connection import Connection
from app.models.disposal import Disposal, DisposalReason
from app.models.part import Part, PartStatus, PartType
from app.models.rig_name import RigIdentity, RigName

__all__: list[str] = [
    "Connection",
    "Disposal",
    "DisposalReason",
    "Part",
    "PartStatus",
    "PartType",
    "RigIdentity",
    "RigName",
]
