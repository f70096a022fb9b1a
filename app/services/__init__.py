"""Services package for the rig history tracker."""

from app.services.connection_service import ConnectionService
from app.services.container import ServiceContainer
from app.services.disposal_service import DisposalService
from app.services.part_service import PartService
from app.services.rig_service import RigService
from app.services.timeline_service import TimelineService

__all__ = [
    "ConnectionService",
    "DisposalService",
    "PartService",
    "RigService",
    "ServiceContainer",
    "TimelineService",
]
