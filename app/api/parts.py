"""Parts management API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.schemas.common import ErrorResponseSchema
from app.schemas.date import to_partial_date
from app.schemas.part import (
    BrandListSchema,
    PartBinQuerySchema,
    PartCreateSchema,
    PartListItemSchema,
    PartListQuerySchema,
    PartResponseSchema,
    PartUpdateSchema,
)
from app.services.container import ServiceContainer
from app.services.disposal_service import DisposalService
from app.services.part_service import PartFilters, PartService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

parts_bp = Blueprint("parts", __name__, url_prefix="/parts")


@parts_bp.route("", methods=["POST"])
@api.validate(json=PartCreateSchema, resp=SpectreeResponse(HTTP_201=PartResponseSchema, HTTP_400=ErrorResponseSchema))
@handle_api_errors
@inject
def create_part(part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Create new part."""
    data = PartCreateSchema.model_validate(request.get_json())
    part = part_service.add_part(
        brand=data.brand,
        model=data.model,
        type=data.type,
        acquired=to_partial_date(data.acquired, "acquisition date"),
        notes=data.notes,
    )

    return PartResponseSchema.model_validate(part).model_dump(), 201


@parts_bp.route("", methods=["GET"])
@api.validate(query=PartListQuerySchema, resp=SpectreeResponse(HTTP_200=list[PartListItemSchema], HTTP_400=ErrorResponseSchema))
@handle_api_errors
@inject
def list_parts(part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """List parts filtered by type, status and free text, sorted by one column."""
    query = PartListQuerySchema.model_validate(request.args.to_dict())
    listings = part_service.get_all_parts(
        PartFilters(type=query.type, status=query.status, search=query.search),
        sort_column=query.sort,
        sort_direction=query.direction,
    )

    return [PartListItemSchema.from_listing(listing).model_dump() for listing in listings]


@parts_bp.route("/bin", methods=["GET"])
@api.validate(query=PartBinQuerySchema, resp=SpectreeResponse(HTTP_200=list[PartResponseSchema], HTTP_400=ErrorResponseSchema))
@handle_api_errors
@inject
def list_parts_in_bin(part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Parts that are neither connected nor deleted."""
    query = PartBinQuerySchema.model_validate(request.args.to_dict())
    parts = part_service.get_parts_in_bin(query.type)
    return [PartResponseSchema.model_validate(part).model_dump() for part in parts]


@parts_bp.route("/brands", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=BrandListSchema))
@handle_api_errors
@inject
def list_brands(part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    return BrandListSchema(brands=part_service.get_unique_brands()).model_dump()


@parts_bp.route("/<int:part_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=PartListItemSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_part(part_id: int, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Get single part with its derived status."""
    listing = part_service.get_part_listing(part_id)
    return PartListItemSchema.from_listing(listing).model_dump()


@parts_bp.route("/<int:part_id>", methods=["PUT"])
@api.validate(json=PartUpdateSchema, resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def update_part(part_id: int, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Replace the editable fields of a part."""
    data = PartUpdateSchema.model_validate(request.get_json())
    part = part_service.update_part(
        part_id,
        brand=data.brand,
        model=data.model,
        type=data.type,
        acquired=to_partial_date(data.acquired, "acquisition date"),
        notes=data.notes,
    )

    return PartResponseSchema.model_validate(part).model_dump()


@parts_bp.route("/<int:part_id>", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_204=None, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def delete_part(part_id: int, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Soft delete a part; its history is kept."""
    part_service.delete_part(part_id)
    return "", 204


@parts_bp.route("/<int:part_id>/permanent", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_204=None, HTTP_404=ErrorResponseSchema, HTTP_500=ErrorResponseSchema))
@handle_api_errors
@inject
def hard_delete_part(part_id: int, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Irreversibly delete a part with its connections, names and disposals."""
    part_service.hard_delete_part(part_id)
    return "", 204


@parts_bp.route("/<int:part_id>/restore", methods=["POST"])
@api.validate(resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def restore_part(
    part_id: int,
    disposal_service: DisposalService = Provide[ServiceContainer.disposal_service],
) -> Any:
    """Undo a disposal. Restoring a part that is not disposed is a no-op."""
    part = disposal_service.restore_disposed_part(part_id)
    return PartResponseSchema.model_validate(part).model_dump()
