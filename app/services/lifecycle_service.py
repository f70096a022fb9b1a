"""Lifecycle service reconstructing rig activity periods from the connection log."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import or_, select

from app.exceptions import RecordNotFoundException
from app.models.connection import Connection
from app.services.base import BaseService
from app.utils.partial_date import DatePrecision, PartialDate

# Sort rank for point events sharing a date; connects come first so a part
# swapped on the same day does not split the rig into two lifecycles.
_CONNECT_RANK = 0
_DISCONNECT_RANK = 1


@dataclass(frozen=True)
class Lifecycle:
    """Contiguous period during which a motherboard hosted at least one part."""

    sequence: int
    start_date: str
    start_precision: DatePrecision
    end_date: str | None = None
    end_precision: DatePrecision | None = None
    active: bool = True

    @property
    def start(self) -> PartialDate:
        return PartialDate.from_stored(self.start_date, self.start_precision)

    @property
    def end(self) -> PartialDate | None:
        if self.end_date is None:
            return None
        return PartialDate.from_stored(self.end_date, self.end_precision)

    def contains(self, date_string: str) -> bool:
        """Check whether a stored date falls inside this lifecycle, bounds included."""
        if date_string < self.start_date:
            return False
        return self.end_date is None or date_string <= self.end_date


@dataclass
class LifecycleSummary:
    """Statistics for one lifecycle of a rig."""

    lifecycle: Lifecycle
    duration_days: int
    unique_components: int
    connection_count: int
    counts_by_type: dict[str, int] = field(default_factory=dict)


def compute_lifecycles_from_connections(connections: Iterable[Connection]) -> list[Lifecycle]:
    """Sweep connect and disconnect point events and emit the 0 to non-zero periods."""
    events: list[tuple[str, int, int, DatePrecision]] = []
    for connection in connections:
        events.append(
            (connection.connected_at, _CONNECT_RANK, connection.id, connection.connected_precision)
        )
        if connection.disconnected_at is not None:
            events.append(
                (
                    connection.disconnected_at,
                    _DISCONNECT_RANK,
                    connection.id,
                    connection.disconnected_precision or DatePrecision.DAY,
                )
            )

    events.sort(key=lambda event: (event[0], event[1], event[2]))

    lifecycles: list[Lifecycle] = []
    open_count = 0
    start: tuple[str, DatePrecision] | None = None

    for event_date, rank, _connection_id, precision in events:
        if rank == _CONNECT_RANK:
            open_count += 1
            if open_count == 1:
                start = (event_date, precision)
            continue

        if open_count == 0:
            # Disconnect dated before its connect; nothing is open to close.
            continue
        open_count -= 1
        if open_count == 0 and start is not None:
            lifecycles.append(
                Lifecycle(
                    sequence=len(lifecycles) + 1,
                    start_date=start[0],
                    start_precision=start[1],
                    end_date=event_date,
                    end_precision=precision,
                    active=False,
                )
            )
            start = None

    if start is not None:
        lifecycles.append(
            Lifecycle(
                sequence=len(lifecycles) + 1,
                start_date=start[0],
                start_precision=start[1],
            )
        )

    return lifecycles


class LifecycleService(BaseService):
    """Service class deriving rig lifecycles. Nothing is cached; every call re-reads the log."""

    def compute_lifecycles(self, motherboard_id: int) -> list[Lifecycle]:
        stmt = select(Connection).where(Connection.motherboard_id == motherboard_id)
        connections = self.db.execute(stmt).scalars().all()
        return compute_lifecycles_from_connections(connections)

    def get_active_lifecycle(self, motherboard_id: int) -> Lifecycle | None:
        lifecycles = self.compute_lifecycles(motherboard_id)
        if lifecycles and lifecycles[-1].active:
            return lifecycles[-1]
        return None

    def get_lifecycle(self, motherboard_id: int, start_date: str) -> Lifecycle:
        """Get the lifecycle of a motherboard that starts on the given date."""
        for lifecycle in self.compute_lifecycles(motherboard_id):
            if lifecycle.start_date == start_date:
                return lifecycle
        raise RecordNotFoundException("Lifecycle", f"{motherboard_id}@{start_date}")

    def find_lifecycle_for_date(self, motherboard_id: int, date_string: str) -> Lifecycle | None:
        """Latest lifecycle of the motherboard containing the given stored date."""
        matches = [
            lifecycle
            for lifecycle in self.compute_lifecycles(motherboard_id)
            if lifecycle.contains(date_string)
        ]
        return matches[-1] if matches else None

    def get_lifecycle_connections(self, motherboard_id: int, lifecycle: Lifecycle) -> list[Connection]:
        """Connections on the motherboard overlapping the lifecycle."""
        stmt = select(Connection).where(
            Connection.motherboard_id == motherboard_id,
            or_(
                Connection.disconnected_at.is_(None),
                Connection.disconnected_at >= lifecycle.start_date,
            ),
        )
        if lifecycle.end_date is not None:
            stmt = stmt.where(Connection.connected_at <= lifecycle.end_date)
        stmt = stmt.order_by(Connection.connected_at, Connection.id)
        return list(self.db.execute(stmt).scalars().all())

    def get_lifecycle_summary(
        self, motherboard_id: int, lifecycle: Lifecycle, today: date | None = None
    ) -> LifecycleSummary:
        """Duration and component statistics for one lifecycle."""
        connections = self.get_lifecycle_connections(motherboard_id, lifecycle)

        end = lifecycle.end.as_date() if lifecycle.end else (today or date.today())
        duration_days = max((end - lifecycle.start.as_date()).days, 0)

        counts = Counter(connection.part.type.value for connection in connections)

        return LifecycleSummary(
            lifecycle=lifecycle,
            duration_days=duration_days,
            unique_components=len({connection.part_id for connection in connections}),
            connection_count=len(connections),
            counts_by_type=dict(counts),
        )
