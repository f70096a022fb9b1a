"""Status service deriving the hosting state of parts."""

from sqlalchemy import case, exists, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from app.models.connection import Connection
from app.models.part import Part, PartStatus, PartType
from app.models.rig_name import RigIdentity, RigName
from app.services.base import BaseService
from app.services.lifecycle_service import LifecycleService


def _relevant_endpoint() -> ColumnElement:
    """Connection column that refers to the part: the host side for motherboards."""
    return case(
        (Part.type == PartType.MOTHERBOARD, Connection.motherboard_id),
        else_=Connection.part_id,
    )


def active_connections_expression() -> ColumnElement[int]:
    """Correlated count of open connections where the part is the relevant endpoint."""
    return (
        select(func.count(Connection.id))
        .where(
            Connection.disconnected_at.is_(None),
            _relevant_endpoint() == Part.id,
        )
        .correlate(Part)
        .scalar_subquery()
    )


def status_expression() -> ColumnElement[str]:
    """SQL rendition of the status rules, usable for filtering and grouping."""
    has_open_connection = (
        exists()
        .where(
            Connection.disconnected_at.is_(None),
            _relevant_endpoint() == Part.id,
        )
        .correlate(Part)
    )
    return case(
        (Part.is_deleted, PartStatus.DELETED.value),
        (has_open_connection, PartStatus.ACTIVE.value),
        else_=PartStatus.BIN.value,
    )


def status_order_expression() -> ColumnElement[int]:
    """Sort key ordering active before bin before deleted."""
    return case(
        (status_expression() == PartStatus.ACTIVE.value, 0),
        (status_expression() == PartStatus.BIN.value, 1),
        else_=2,
    )


class StatusService(BaseService):
    """Service class projecting current status from connection and disposal records."""

    def __init__(self, db: Session, lifecycle_service: LifecycleService):
        super().__init__(db)
        self.lifecycle_service = lifecycle_service

    def status(self, part: Part) -> PartStatus:
        if part.is_deleted:
            return PartStatus.DELETED
        if self.active_connection_count(part) > 0:
            return PartStatus.ACTIVE
        return PartStatus.BIN

    def active_connection_count(self, part: Part) -> int:
        endpoint = Connection.motherboard_id if part.is_motherboard else Connection.part_id
        stmt = select(func.count(Connection.id)).where(
            endpoint == part.id,
            Connection.disconnected_at.is_(None),
        )
        return self.db.execute(stmt).scalar() or 0

    def current_rig_name(self, motherboard_id: int) -> str | None:
        """Name of the rig the motherboard currently forms.

        The open legacy identity wins; otherwise the name keyed to the start
        of the active lifecycle is used.
        """
        stmt = (
            select(RigIdentity.name)
            .where(
                RigIdentity.motherboard_id == motherboard_id,
                RigIdentity.active_until.is_(None),
            )
            .order_by(RigIdentity.active_from.desc())
            .limit(1)
        )
        name = self.db.execute(stmt).scalar_one_or_none()
        if name:
            return name

        lifecycle = self.lifecycle_service.get_active_lifecycle(motherboard_id)
        if lifecycle is None:
            return None

        stmt = select(RigName.name).where(
            RigName.motherboard_id == motherboard_id,
            RigName.start_date == lifecycle.start_date,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def current_motherboard(self, part: Part) -> Part | None:
        """Motherboard a non-motherboard part is currently plugged into."""
        if part.is_motherboard:
            return None
        stmt = (
            select(Connection)
            .where(Connection.part_id == part.id, Connection.disconnected_at.is_(None))
            .order_by(Connection.connected_at.desc(), Connection.id.desc())
            .limit(1)
        )
        connection = self.db.execute(stmt).scalar_one_or_none()
        return connection.motherboard if connection else None

    def count_by_status(self) -> dict[str, int]:
        """Number of parts per derived status."""
        status = status_expression().label("status")
        stmt = select(status, func.count(Part.id)).group_by(status)
        counts = {member.value: 0 for member in PartStatus}
        for value, count in self.db.execute(stmt).all():
            counts[value] = count
        return counts
