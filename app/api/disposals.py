"""Disposal API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.exceptions import RecordNotFoundException
from app.schemas.bulk import BulkResultSchema
from app.schemas.common import ErrorResponseSchema
from app.schemas.date import to_partial_date
from app.schemas.disposal import (
    BulkDisposeRequestSchema,
    DisposalResponseSchema,
    DisposeRequestSchema,
)
from app.services.container import ServiceContainer
from app.services.disposal_service import DisposalService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

disposals_bp = Blueprint("disposals", __name__, url_prefix="/disposals")


@disposals_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[DisposalResponseSchema]))
@handle_api_errors
@inject
def list_disposals(disposal_service: DisposalService = Provide[ServiceContainer.disposal_service]) -> Any:
    return [
        DisposalResponseSchema.model_validate(disposal).model_dump()
        for disposal in disposal_service.get_all_disposals()
    ]


@disposals_bp.route("/parts/<int:part_id>", methods=["POST"])
@api.validate(json=DisposeRequestSchema, resp=SpectreeResponse(HTTP_201=DisposalResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def dispose_part(
    part_id: int,
    disposal_service: DisposalService = Provide[ServiceContainer.disposal_service],
) -> Any:
    """Dispose of a part, closing every open connection it takes part in."""
    data = DisposeRequestSchema.model_validate(request.get_json())
    disposal = disposal_service.dispose_part(
        part_id,
        to_partial_date(data.disposed, "disposal date"),
        reason=data.reason,
        notes=data.notes,
        recipient=data.recipient,
        price=data.price,
    )
    return DisposalResponseSchema.model_validate(disposal).model_dump(), 201


@disposals_bp.route("/bulk", methods=["POST"])
@api.validate(json=BulkDisposeRequestSchema, resp=SpectreeResponse(HTTP_200=BulkResultSchema, HTTP_400=ErrorResponseSchema))
@handle_api_errors
@inject
def bulk_dispose(disposal_service: DisposalService = Provide[ServiceContainer.disposal_service]) -> Any:
    data = BulkDisposeRequestSchema.model_validate(request.get_json())
    result = disposal_service.bulk_dispose(
        data.part_ids,
        to_partial_date(data.disposed, "disposal date"),
        reason=data.reason,
        notes=data.notes,
        recipient=data.recipient,
        price=data.price,
    )
    return BulkResultSchema.model_validate(result).model_dump()


@disposals_bp.route("/parts/<int:part_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[DisposalResponseSchema]))
@handle_api_errors
@inject
def list_part_disposals(
    part_id: int,
    disposal_service: DisposalService = Provide[ServiceContainer.disposal_service],
) -> Any:
    return [
        DisposalResponseSchema.model_validate(disposal).model_dump()
        for disposal in disposal_service.get_disposals_for_part(part_id)
    ]


@disposals_bp.route("/parts/<int:part_id>/latest", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=DisposalResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_latest_disposal(
    part_id: int,
    disposal_service: DisposalService = Provide[ServiceContainer.disposal_service],
) -> Any:
    """Latest disposal of the part by date."""
    disposal = disposal_service.get_disposal_for_part(part_id)
    if disposal is None:
        raise RecordNotFoundException("Disposal of part", part_id)
    return DisposalResponseSchema.model_validate(disposal).model_dump()


@disposals_bp.route("/<int:disposal_id>", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_204=None, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def delete_disposal(
    disposal_id: int,
    disposal_service: DisposalService = Provide[ServiceContainer.disposal_service],
) -> Any:
    """Remove one disposal; the part is restored once none remain."""
    disposal_service.delete_disposal(disposal_id)
    return "", 204
