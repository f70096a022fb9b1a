"""Part timeline API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint
from spectree import Response as SpectreeResponse

from app.schemas.common import ErrorResponseSchema
from app.schemas.timeline import TimelineEventSchema
from app.services.container import ServiceContainer
from app.services.timeline_service import TimelineService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

timeline_bp = Blueprint("timeline", __name__, url_prefix="/timeline")


@timeline_bp.route("/parts/<int:part_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[TimelineEventSchema], HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_timeline(
    part_id: int,
    timeline_service: TimelineService = Provide[ServiceContainer.timeline_service],
) -> Any:
    """Acquisition, connection and disposal events of a part, oldest first."""
    return [
        TimelineEventSchema.model_validate(event).model_dump()
        for event in timeline_service.build_timeline(part_id)
    ]


@timeline_bp.route("/parts/<int:part_id>/<string:kind>/<string:date>", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_204=None, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def delete_timeline_event(
    part_id: int,
    kind: str,
    date: str,
    timeline_service: TimelineService = Provide[ServiceContainer.timeline_service],
) -> Any:
    """Delete an event by changing the record it was derived from."""
    timeline_service.delete_timeline_event(part_id, kind, date)
    return "", 204
