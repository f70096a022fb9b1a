"""Timeline service projecting a part's records into one chronological history."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import InvalidInputException, InvalidOperationException, RecordNotFoundException
from app.models.connection import Connection
from app.models.disposal import Disposal
from app.models.part import Part
from app.services.base import BaseService
from app.services.connection_service import ConnectionService
from app.services.disposal_service import DisposalService
from app.services.identity_resolvers import IdentityResolver
from app.services.lifecycle_service import LifecycleService
from app.utils.partial_date import DatePrecision

logger = logging.getLogger(__name__)


class TimelineEventKind(str, Enum):
    ACQUISITION = "acquisition"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    DISPOSED = "disposed"


@dataclass
class TimelineEvent:
    """One entry of a part timeline.

    Events are never stored. ``source_id`` points at the record the event was
    projected from: the part, the connection or the disposal.
    """

    date: str | None
    precision: DatePrecision | None
    kind: TimelineEventKind
    title: str
    content: str
    notes: str
    source_id: int


class TimelineService(BaseService):
    """Service class building and editing part timelines."""

    def __init__(
        self,
        db: Session,
        lifecycle_service: LifecycleService,
        identity_resolver: IdentityResolver,
        connection_service: ConnectionService,
        disposal_service: DisposalService,
    ):
        super().__init__(db)
        self.lifecycle_service = lifecycle_service
        self.identity_resolver = identity_resolver
        self.connection_service = connection_service
        self.disposal_service = disposal_service

    def _get_part(self, part_id: int) -> Part:
        part = self.db.get(Part, part_id)
        if part is None:
            raise RecordNotFoundException("Part", part_id)
        return part

    def _rig_name_at(self, motherboard_id: int, date_string: str) -> str | None:
        lifecycle = self.lifecycle_service.find_lifecycle_for_date(motherboard_id, date_string)
        if lifecycle is None:
            return None
        return self.identity_resolver.resolve(motherboard_id, lifecycle)

    def build_timeline(self, part_id: int) -> list[TimelineEvent]:
        """Acquisition, connection and disposal events of a part, oldest first."""
        part = self._get_part(part_id)
        events: list[TimelineEvent] = []

        if part.acquisition_date:
            events.append(
                TimelineEvent(
                    date=part.acquisition_date,
                    precision=part.date_precision,
                    kind=TimelineEventKind.ACQUISITION,
                    title="Part Acquired",
                    content=f"The {part.brand} {part.model} was acquired.",
                    notes="",
                    source_id=part.id,
                )
            )

        if part.is_motherboard:
            connections = self.connection_service.get_connections_for_motherboard(part_id)
        else:
            connections = self.connection_service.get_connections_for_part(part_id)

        for connection in reversed(connections):
            events.extend(self._connection_events(part, connection))

        disposal = self.disposal_service.get_disposal_for_part(part_id)
        if disposal is not None:
            events.append(
                TimelineEvent(
                    date=disposal.disposed_at,
                    precision=disposal.disposed_precision or DatePrecision.DAY,
                    kind=TimelineEventKind.DISPOSED,
                    title="Part Disposed",
                    content=f"The part was disposed: {disposal.reason}",
                    notes=disposal.notes or "",
                    source_id=disposal.id,
                )
            )

        # Stored dates are zero-padded, so string order is chronological.
        events.sort(key=lambda event: (event.date is not None, event.date or ""))
        return events

    def _connection_events(self, part: Part, connection: Connection) -> list[TimelineEvent]:
        rig_name = self._rig_name_at(connection.motherboard_id, connection.connected_at)
        rig_text = f' (Part of "{rig_name}" rig)' if rig_name else ""

        if part.is_motherboard:
            counterpart = connection.part.display_name
            connected_title, connected_content = "Part Connected", f"Hosted {counterpart}{rig_text}"
            disconnected_title, disconnected_content = "Part Disconnected", f"Released {counterpart}{rig_text}"
        else:
            counterpart = connection.motherboard.display_name
            connected_title, connected_content = "Connected to Motherboard", f"Connected to {counterpart}{rig_text}"
            disconnected_title = "Disconnected from Motherboard"
            disconnected_content = f"Disconnected from {counterpart}{rig_text}"

        events = [
            TimelineEvent(
                date=connection.connected_at,
                precision=connection.connected_precision or DatePrecision.DAY,
                kind=TimelineEventKind.CONNECTED,
                title=connected_title,
                content=connected_content,
                notes=connection.notes or "",
                source_id=connection.id,
            )
        ]
        if connection.disconnected_at is not None:
            events.append(
                TimelineEvent(
                    date=connection.disconnected_at,
                    precision=connection.disconnected_precision or DatePrecision.DAY,
                    kind=TimelineEventKind.DISCONNECTED,
                    title=disconnected_title,
                    content=disconnected_content,
                    notes=connection.notes or "",
                    source_id=connection.id,
                )
            )
        return events

    def delete_timeline_event(self, part_id: int, kind: TimelineEventKind | str, date: str) -> None:
        """Remove an event by mutating the record it was projected from."""
        try:
            event_kind = TimelineEventKind(kind)
        except ValueError as e:
            allowed = ", ".join(member.value for member in TimelineEventKind)
            raise InvalidInputException("event kind", f"'{kind}' is not one of {allowed}") from e

        part = self._get_part(part_id)
        endpoint = Connection.motherboard_id if part.is_motherboard else Connection.part_id

        if event_kind == TimelineEventKind.ACQUISITION:
            if part.acquisition_date != date:
                raise RecordNotFoundException("Acquisition event", f"{part_id}@{date}")
            part.acquisition_date = None
            part.date_precision = None
            self.db.flush()

        elif event_kind == TimelineEventKind.CONNECTED:
            matches = self.db.execute(
                select(Connection).where(
                    endpoint == part_id,
                    Connection.connected_at == date,
                    Connection.disconnected_at.is_(None),
                )
            ).scalars().all()
            if not matches:
                raise RecordNotFoundException("Open connection", f"{part_id}@{date}")
            for connection in matches:
                self.connection_service.delete_connection(connection.id)

        elif event_kind == TimelineEventKind.DISCONNECTED:
            self._reopen_connections(part, endpoint, date)

        else:
            disposals = self.db.execute(
                select(Disposal.id).where(Disposal.part_id == part_id, Disposal.disposed_at == date)
            ).scalars().all()
            if not disposals:
                raise RecordNotFoundException("Disposal", f"{part_id}@{date}")
            for disposal_id in disposals:
                self.disposal_service.delete_disposal(disposal_id)

        logger.info("Deleted %s event of part %d at %s", event_kind.value, part_id, date)

    def _reopen_connections(self, part: Part, endpoint, date: str) -> None:
        operation = f"delete the disconnect of part {part.id} on {date}"
        matches = self.db.execute(
            select(Connection)
            .where(endpoint == part.id, Connection.disconnected_at == date)
            .order_by(Connection.connected_at.desc(), Connection.id.desc())
        ).scalars().all()
        if not matches:
            raise RecordNotFoundException("Disconnect event", f"{part.id}@{date}")
        if not part.is_motherboard:
            # A part may only have one open connection.
            matches = matches[:1]

        with self.atomic(operation):
            for connection in matches:
                still_open = self.connection_service.get_active_connections_for_part(connection.part_id)
                if still_open:
                    raise InvalidOperationException(
                        operation,
                        f"part {connection.part_id} is connected to motherboard {still_open[0].motherboard_id}",
                    )
                connection.disconnected_at = None
                connection.disconnected_precision = None
