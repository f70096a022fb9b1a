"""Connection API endpoints: connect, disconnect and the connection log."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.schemas.bulk import BulkResultSchema
from app.schemas.common import ErrorResponseSchema
from app.schemas.connection import (
    ActiveQuerySchema,
    BulkConnectRequestSchema,
    BulkDisconnectRequestSchema,
    ConflictPreviewQuerySchema,
    ConnectionResponseSchema,
    ConnectRequestSchema,
    ConnectResponseSchema,
    DisconnectRequestSchema,
    SlotConflictSchema,
)
from app.schemas.date import to_partial_date
from app.services.conflict_service import ConflictService
from app.services.connection_service import ConnectionService
from app.services.container import ServiceContainer
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

connections_bp = Blueprint("connections", __name__, url_prefix="/connections")


def _dump_connections(connections) -> list[dict[str, Any]]:  # type: ignore[no-untyped-def]
    return [ConnectionResponseSchema.model_validate(connection).model_dump() for connection in connections]


@connections_bp.route("", methods=["POST"])
@api.validate(json=ConnectRequestSchema, resp=SpectreeResponse(HTTP_201=ConnectResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def connect_part(connection_service: ConnectionService = Provide[ServiceContainer.connection_service]) -> Any:
    """Connect a part to a motherboard.

    Parts of the same type already on the motherboard are disconnected at the
    new connection date unless ``keep_existing`` is set. Either way they are
    reported under ``conflicts``.
    """
    data = ConnectRequestSchema.model_validate(request.get_json())
    result = connection_service.connect_part(
        data.part_id,
        data.motherboard_id,
        when=to_partial_date(data.connected, "connection date"),
        notes=data.notes,
        keep_existing=data.keep_existing,
    )

    return ConnectResponseSchema.model_validate(result).model_dump(), 201


@connections_bp.route("/preview", methods=["GET"])
@api.validate(query=ConflictPreviewQuerySchema, resp=SpectreeResponse(HTTP_200=SlotConflictSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def preview_conflicts(conflict_service: ConflictService = Provide[ServiceContainer.conflict_service]) -> Any:
    """Report which parts a connect would displace, without changing anything."""
    query = ConflictPreviewQuerySchema.model_validate(request.args.to_dict())
    report = conflict_service.preview_conflicts(query.part_id, query.motherboard_id)
    return SlotConflictSchema.model_validate(report).model_dump()


@connections_bp.route("/bulk", methods=["POST"])
@api.validate(json=BulkConnectRequestSchema, resp=SpectreeResponse(HTTP_200=BulkResultSchema, HTTP_400=ErrorResponseSchema))
@handle_api_errors
@inject
def bulk_connect(connection_service: ConnectionService = Provide[ServiceContainer.connection_service]) -> Any:
    data = BulkConnectRequestSchema.model_validate(request.get_json())
    result = connection_service.bulk_connect(
        data.part_ids,
        data.motherboard_id,
        when=to_partial_date(data.connected, "connection date"),
        notes=data.notes,
        keep_existing_types=data.keep_existing_types,
    )
    return BulkResultSchema.model_validate(result).model_dump()


@connections_bp.route("/bulk-disconnect", methods=["POST"])
@api.validate(json=BulkDisconnectRequestSchema, resp=SpectreeResponse(HTTP_200=BulkResultSchema, HTTP_400=ErrorResponseSchema))
@handle_api_errors
@inject
def bulk_disconnect(connection_service: ConnectionService = Provide[ServiceContainer.connection_service]) -> Any:
    data = BulkDisconnectRequestSchema.model_validate(request.get_json())
    result = connection_service.bulk_disconnect(
        data.part_ids,
        to_partial_date(data.disconnected, "disconnect date"),
        notes=data.notes,
    )
    return BulkResultSchema.model_validate(result).model_dump()


@connections_bp.route("/<int:connection_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=ConnectionResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_connection(
    connection_id: int,
    connection_service: ConnectionService = Provide[ServiceContainer.connection_service],
) -> Any:
    connection = connection_service.get_connection(connection_id)
    return ConnectionResponseSchema.model_validate(connection).model_dump()


@connections_bp.route("/<int:connection_id>/disconnect", methods=["POST"])
@api.validate(json=DisconnectRequestSchema, resp=SpectreeResponse(HTTP_200=ConnectionResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def disconnect_connection(
    connection_id: int,
    connection_service: ConnectionService = Provide[ServiceContainer.connection_service],
) -> Any:
    """Close one connection."""
    data = DisconnectRequestSchema.model_validate(request.get_json())
    connection = connection_service.disconnect_connection(
        connection_id,
        to_partial_date(data.disconnected, "disconnect date"),
        notes=data.notes,
    )
    return ConnectionResponseSchema.model_validate(connection).model_dump()


@connections_bp.route("/<int:connection_id>", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_204=None, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def delete_connection(
    connection_id: int,
    connection_service: ConnectionService = Provide[ServiceContainer.connection_service],
) -> Any:
    """Remove a connection row entirely."""
    connection_service.delete_connection(connection_id)
    return "", 204


@connections_bp.route("/parts/<int:part_id>", methods=["GET"])
@api.validate(query=ActiveQuerySchema, resp=SpectreeResponse(HTTP_200=list[ConnectionResponseSchema]))
@handle_api_errors
@inject
def list_part_connections(
    part_id: int,
    connection_service: ConnectionService = Provide[ServiceContainer.connection_service],
) -> Any:
    """Connections where the part is the hosted part, newest first."""
    query = ActiveQuerySchema.model_validate(request.args.to_dict())
    if query.active:
        return _dump_connections(connection_service.get_active_connections_for_part(part_id))
    return _dump_connections(connection_service.get_connections_for_part(part_id))


@connections_bp.route("/parts/<int:part_id>/disconnect", methods=["POST"])
@api.validate(json=DisconnectRequestSchema, resp=SpectreeResponse(HTTP_200=list[ConnectionResponseSchema], HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def disconnect_part(
    part_id: int,
    connection_service: ConnectionService = Provide[ServiceContainer.connection_service],
) -> Any:
    """Close every open connection of a part."""
    data = DisconnectRequestSchema.model_validate(request.get_json())
    connections = connection_service.disconnect_part_by_id(
        part_id,
        to_partial_date(data.disconnected, "disconnect date"),
        notes=data.notes,
    )
    return _dump_connections(connections)


@connections_bp.route("/motherboards/<int:motherboard_id>", methods=["GET"])
@api.validate(query=ActiveQuerySchema, resp=SpectreeResponse(HTTP_200=list[ConnectionResponseSchema]))
@handle_api_errors
@inject
def list_motherboard_connections(
    motherboard_id: int,
    connection_service: ConnectionService = Provide[ServiceContainer.connection_service],
) -> Any:
    """Connections hosted on the motherboard."""
    query = ActiveQuerySchema.model_validate(request.args.to_dict())
    if query.active:
        return _dump_connections(connection_service.get_active_connections_for_motherboard(motherboard_id))
    return _dump_connections(connection_service.get_connections_for_motherboard(motherboard_id))
