"""Connection service managing the connect and disconnect lifecycle of parts."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.exceptions import (
    BusinessLogicException,
    InvalidInputException,
    InvalidOperationException,
    RecordNotFoundException,
)
from app.models.connection import Connection
from app.models.part import Part, PartType
from app.services.base import BaseService
from app.services.conflict_service import ConflictService, SlotConflictReport
from app.services.metrics_service import MetricsServiceProtocol
from app.utils.partial_date import PartialDate

logger = logging.getLogger(__name__)


@dataclass
class ConnectResult:
    """Outcome of a connect: the new connection and the slot conflicts it met."""

    connection: Connection
    conflicts: SlotConflictReport


@dataclass
class BulkFailure:
    part_id: int
    message: str


@dataclass
class BulkResult:
    """Tally of a bulk operation. Items succeed or fail on their own."""

    success_count: int = 0
    failures: list[BulkFailure] = field(default_factory=list)
    conflicts: list[SlotConflictReport] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)


class ConnectionService(BaseService):
    """Service class for connecting and disconnecting parts."""

    def __init__(self, db: Session, conflict_service: ConflictService, metrics_service: MetricsServiceProtocol):
        super().__init__(db)
        self.conflict_service = conflict_service
        self.metrics_service = metrics_service

    def _get_part(self, part_id: int) -> Part:
        part = self.db.get(Part, part_id)
        if part is None:
            raise RecordNotFoundException("Part", part_id)
        return part

    def get_connection(self, connection_id: int) -> Connection:
        connection = self.db.get(Connection, connection_id)
        if connection is None:
            raise RecordNotFoundException("Connection", connection_id)
        return connection

    def connect_part(
        self,
        part_id: int,
        motherboard_id: int,
        when: PartialDate | None = None,
        notes: str = "",
        keep_existing: bool = False,
    ) -> ConnectResult:
        """Connect a part to a motherboard, displacing same-type occupants unless kept.

        Without a date the part's acquisition date is used at its stored precision.
        """
        part = self._get_part(part_id)
        if part.is_motherboard:
            raise InvalidInputException(
                "part", f"part {part_id} is a motherboard and cannot be connected to another motherboard"
            )

        motherboard = self._get_part(motherboard_id)
        operation = f"connect part {part_id} to part {motherboard_id}"
        if not motherboard.is_motherboard:
            raise InvalidOperationException(operation, f"part {motherboard_id} is not a motherboard")
        if part.is_deleted:
            raise InvalidOperationException(operation, f"part {part_id} has been disposed")
        if motherboard.is_deleted:
            raise InvalidOperationException(operation, f"motherboard {motherboard_id} has been disposed")

        if when is None:
            when = part.acquired
            if when is None:
                raise InvalidInputException(
                    "connection date",
                    f"a year is required because part {part_id} has no acquisition date",
                )

        with self.atomic(operation):
            current = self.get_active_connections_for_part(part_id)
            if current:
                raise InvalidOperationException(
                    operation, f"it is already connected to motherboard {current[0].motherboard_id}"
                )

            conflicts = self.conflict_service.find_conflicts(
                motherboard_id, part.type, exclude_part_id=part_id
            )
            report = self.conflict_service.resolve(
                motherboard_id, part.type, conflicts, when, keep_existing=keep_existing
            )

            connection = Connection(
                motherboard_id=motherboard_id,
                part_id=part_id,
                connected_at=when.date_string,
                connected_precision=when.precision,
                notes=notes or "",
            )
            self.db.add(connection)

        logger.info("Connected part %d to motherboard %d at %s", part_id, motherboard_id, when)
        self.metrics_service.record_connection_event("connected")
        self.metrics_service.record_auto_displacement(report.displaced_count)

        return ConnectResult(connection=connection, conflicts=report)

    def disconnect_part_by_id(
        self, part_id: int, when: PartialDate | None, notes: str = ""
    ) -> list[Connection]:
        """Close every open connection of the part. Returns the closed connections."""
        if when is None:
            raise InvalidInputException("disconnect date", "a year is required")
        self._get_part(part_id)

        operation = f"disconnect part {part_id}"
        with self.atomic(operation):
            connections = self.get_active_connections_for_part(part_id)
            if not connections:
                raise InvalidOperationException(operation, "it is not connected to any motherboard")
            for connection in connections:
                self.close_connection(connection, when, notes, operation)

        if len(connections) > 1:
            logger.warning("Part %d had %d open connections; all were closed", part_id, len(connections))
        self.metrics_service.record_connection_event("disconnected", len(connections))
        return connections

    def disconnect_connection(
        self, connection_id: int, when: PartialDate | None, notes: str = ""
    ) -> Connection:
        if when is None:
            raise InvalidInputException("disconnect date", "a year is required")

        operation = f"disconnect connection {connection_id}"
        with self.atomic(operation):
            connection = self.get_connection(connection_id)
            if not connection.is_open:
                raise InvalidOperationException(
                    operation, f"it was already closed on {connection.disconnected_at}"
                )
            self.close_connection(connection, when, notes, operation)

        self.metrics_service.record_connection_event("disconnected")
        return connection

    def delete_connection(self, connection_id: int) -> None:
        """Remove a connection row entirely."""
        self.get_connection(connection_id)
        with self.atomic(f"delete connection {connection_id}"):
            self.db.execute(delete(Connection).where(Connection.id == connection_id))

    def get_connections_for_part(self, part_id: int) -> list[Connection]:
        stmt = (
            select(Connection)
            .where(Connection.part_id == part_id)
            .order_by(Connection.connected_at.desc(), Connection.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_connections_for_motherboard(self, motherboard_id: int) -> list[Connection]:
        stmt = (
            select(Connection)
            .where(Connection.motherboard_id == motherboard_id)
            .order_by(Connection.connected_at.desc(), Connection.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_active_connections_for_part(self, part_id: int) -> list[Connection]:
        stmt = (
            select(Connection)
            .where(Connection.part_id == part_id, Connection.disconnected_at.is_(None))
            .order_by(Connection.connected_at, Connection.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_active_connections_for_motherboard(self, motherboard_id: int) -> list[Connection]:
        stmt = (
            select(Connection)
            .join(Part, Connection.part_id == Part.id)
            .where(Connection.motherboard_id == motherboard_id, Connection.disconnected_at.is_(None))
            .order_by(Part.type, Part.brand, Part.model)
        )
        return list(self.db.execute(stmt).scalars().all())

    def bulk_connect(
        self,
        part_ids: Iterable[int],
        motherboard_id: int,
        when: PartialDate | None = None,
        notes: str = "",
        keep_existing_types: Iterable[PartType] = (),
    ) -> BulkResult:
        """Connect several parts, each in its own savepoint.

        ``keep_existing_types`` lists the part types whose current occupants
        stay connected instead of being displaced.
        """
        keep_types = set(keep_existing_types)
        result = BulkResult()

        for part_id in part_ids:
            part = self.db.get(Part, part_id)
            keep = part is not None and part.type in keep_types
            try:
                outcome = self.connect_part(part_id, motherboard_id, when, notes, keep_existing=keep)
            except BusinessLogicException as e:
                logger.info("Bulk connect skipped part %d: %s", part_id, e.message)
                result.failures.append(BulkFailure(part_id=part_id, message=e.message))
                self.metrics_service.record_bulk_item_failure("connect")
                continue

            result.success_count += 1
            if outcome.conflicts.has_conflicts:
                result.conflicts.append(outcome.conflicts)

        return result

    def bulk_disconnect(
        self, part_ids: Iterable[int], when: PartialDate | None, notes: str = ""
    ) -> BulkResult:
        """Disconnect several parts, each in its own savepoint."""
        if when is None:
            raise InvalidInputException("disconnect date", "a year is required")

        result = BulkResult()
        for part_id in part_ids:
            try:
                self.disconnect_part_by_id(part_id, when, notes)
            except BusinessLogicException as e:
                logger.info("Bulk disconnect skipped part %d: %s", part_id, e.message)
                result.failures.append(BulkFailure(part_id=part_id, message=e.message))
                self.metrics_service.record_bulk_item_failure("disconnect")
                continue
            result.success_count += 1

        return result
