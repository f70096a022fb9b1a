"""Rig API endpoints: rig listings, lifecycles and rig names."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.exceptions import RecordNotFoundException
from app.schemas.common import DeletedCountSchema, ErrorResponseSchema
from app.schemas.connection import ConnectionResponseSchema
from app.schemas.date import to_partial_date
from app.schemas.rig import (
    LifecycleSchema,
    LifecycleSummarySchema,
    RigDetailsSchema,
    RigIdentityRequestSchema,
    RigIdentityResponseSchema,
    RigNameRequestSchema,
    RigNameResponseSchema,
    RigSummarySchema,
)
from app.services.container import ServiceContainer
from app.services.lifecycle_service import LifecycleService
from app.services.rig_service import RigService
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

rigs_bp = Blueprint("rigs", __name__, url_prefix="/rigs")


@rigs_bp.route("/active", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[RigSummarySchema]))
@handle_api_errors
@inject
def list_active_rigs(rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    """Motherboards currently hosting parts, named rigs first."""
    return [RigSummarySchema.from_summary(rig).model_dump() for rig in rig_service.get_active_rigs()]


@rigs_bp.route("/historical", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[RigSummarySchema]))
@handle_api_errors
@inject
def list_historical_rigs(rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    """Motherboards that hosted parts before but host none now."""
    return [RigSummarySchema.from_summary(rig).model_dump() for rig in rig_service.get_historical_rigs()]


@rigs_bp.route("/<int:motherboard_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=RigDetailsSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_rig(motherboard_id: int, rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    return RigDetailsSchema.from_details(rig_service.get_rig_details(motherboard_id)).model_dump()


@rigs_bp.route("/<int:motherboard_id>/lifecycles", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[LifecycleSchema], HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def list_lifecycles(
    motherboard_id: int,
    rig_service: RigService = Provide[ServiceContainer.rig_service],
    lifecycle_service: LifecycleService = Provide[ServiceContainer.lifecycle_service],
) -> Any:
    """Computed lifecycles of a motherboard with their resolved names."""
    rig_service.get_motherboard(motherboard_id)
    return [
        LifecycleSchema.from_lifecycle(lifecycle, rig_service.resolve_name(motherboard_id, lifecycle)).model_dump()
        for lifecycle in lifecycle_service.compute_lifecycles(motherboard_id)
    ]


@rigs_bp.route("/<int:motherboard_id>/lifecycles/<string:start_date>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=LifecycleSummarySchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_lifecycle_summary(
    motherboard_id: int,
    start_date: str,
    rig_service: RigService = Provide[ServiceContainer.rig_service],
    lifecycle_service: LifecycleService = Provide[ServiceContainer.lifecycle_service],
) -> Any:
    """Duration and component statistics for the lifecycle starting on ``start_date``."""
    rig_service.get_motherboard(motherboard_id)
    lifecycle = lifecycle_service.get_lifecycle(motherboard_id, start_date)
    summary = lifecycle_service.get_lifecycle_summary(motherboard_id, lifecycle)

    return LifecycleSummarySchema(
        lifecycle=LifecycleSchema.from_lifecycle(lifecycle, rig_service.resolve_name(motherboard_id, lifecycle)),
        duration_days=summary.duration_days,
        unique_components=summary.unique_components,
        connection_count=summary.connection_count,
        counts_by_type=summary.counts_by_type,
    ).model_dump()


@rigs_bp.route("/<int:motherboard_id>/lifecycles/<string:start_date>/connections", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[ConnectionResponseSchema], HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def list_lifecycle_connections(
    motherboard_id: int,
    start_date: str,
    rig_service: RigService = Provide[ServiceContainer.rig_service],
    lifecycle_service: LifecycleService = Provide[ServiceContainer.lifecycle_service],
) -> Any:
    rig_service.get_motherboard(motherboard_id)
    lifecycle = lifecycle_service.get_lifecycle(motherboard_id, start_date)
    return [
        ConnectionResponseSchema.model_validate(connection).model_dump()
        for connection in lifecycle_service.get_lifecycle_connections(motherboard_id, lifecycle)
    ]


@rigs_bp.route("/<int:motherboard_id>/names/<string:start_date>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=RigNameResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_rig_name(
    motherboard_id: int,
    start_date: str,
    rig_service: RigService = Provide[ServiceContainer.rig_service],
) -> Any:
    rig_name = rig_service.get_rig_name(motherboard_id, start_date)
    if rig_name is None:
        raise RecordNotFoundException("Rig name", f"{motherboard_id}@{start_date}")
    return RigNameResponseSchema.model_validate(rig_name).model_dump()


@rigs_bp.route("/<int:motherboard_id>/names", methods=["PUT"])
@api.validate(json=RigNameRequestSchema, resp=SpectreeResponse(HTTP_200=RigNameResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def set_rig_name(motherboard_id: int, rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    """Name the lifecycle that starts on the given date, replacing any earlier name."""
    data = RigNameRequestSchema.model_validate(request.get_json())
    rig_name = rig_service.set_rig_name(motherboard_id, data.start_date, data.name, data.notes)
    return RigNameResponseSchema.model_validate(rig_name).model_dump()


@rigs_bp.route("/<int:motherboard_id>/names", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_200=DeletedCountSchema))
@handle_api_errors
@inject
def delete_rig_names(motherboard_id: int, rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    return DeletedCountSchema(deleted=rig_service.delete_all_rig_names(motherboard_id)).model_dump()


@rigs_bp.route("/<int:motherboard_id>/identities", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[RigIdentityResponseSchema]))
@handle_api_errors
@inject
def list_rig_identities(motherboard_id: int, rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    return [
        RigIdentityResponseSchema.model_validate(identity).model_dump()
        for identity in rig_service.get_rig_identities(motherboard_id)
    ]


@rigs_bp.route("/<int:motherboard_id>/identities", methods=["POST"])
@api.validate(json=RigIdentityRequestSchema, resp=SpectreeResponse(HTTP_201=RigIdentityResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def set_rig_identity(motherboard_id: int, rig_service: RigService = Provide[ServiceContainer.rig_service]) -> Any:
    """Start an interval based identity; the open one is closed at the same date."""
    data = RigIdentityRequestSchema.model_validate(request.get_json())
    identity = rig_service.set_rig_identity(
        motherboard_id,
        data.name,
        to_partial_date(data.active_from, "active from date"),
        data.notes,
    )
    return RigIdentityResponseSchema.model_validate(identity).model_dump(), 201
