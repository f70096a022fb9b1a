"""Conflict service detecting same-type occupants of a motherboard slot."""

import logging
from dataclasses import dataclass, field

from sqlalchemy import select

from app.exceptions import InvalidInputException, RecordNotFoundException
from app.models.connection import Connection
from app.models.part import Part, PartType
from app.services.base import BaseService
from app.utils.partial_date import PartialDate

logger = logging.getLogger(__name__)

AUTO_DISCONNECT_NOTE = "Automatically disconnected due to new part connection"


@dataclass
class SlotConflictReport:
    """Occupants found in the slot a new connection targets.

    Conflicts are reported as data for the caller to act on, never raised.
    """

    motherboard_id: int
    part_type: PartType
    connection_ids: list[int] = field(default_factory=list)
    part_ids: list[int] = field(default_factory=list)
    kept: bool = False

    @property
    def has_conflicts(self) -> bool:
        return bool(self.connection_ids)

    @property
    def displaced_count(self) -> int:
        return 0 if self.kept else len(self.connection_ids)


class ConflictService(BaseService):
    """Service class resolving slot conflicts when a part is connected."""

    def find_conflicts(
        self, motherboard_id: int, part_type: PartType, exclude_part_id: int | None = None
    ) -> list[Connection]:
        """Open connections on the motherboard whose part has the same type."""
        if part_type == PartType.MOTHERBOARD:
            raise InvalidInputException("part type", "a motherboard cannot be connected to another motherboard")

        stmt = (
            select(Connection)
            .join(Part, Connection.part_id == Part.id)
            .where(
                Connection.motherboard_id == motherboard_id,
                Connection.disconnected_at.is_(None),
                Part.type == part_type,
            )
            .order_by(Connection.connected_at, Connection.id)
        )
        if exclude_part_id is not None:
            stmt = stmt.where(Connection.part_id != exclude_part_id)
        return list(self.db.execute(stmt).scalars().all())

    def resolve(
        self,
        motherboard_id: int,
        part_type: PartType,
        conflicts: list[Connection],
        when: PartialDate,
        keep_existing: bool = False,
    ) -> SlotConflictReport:
        """Close the conflicting connections at ``when`` unless the caller keeps them."""
        report = SlotConflictReport(
            motherboard_id=motherboard_id,
            part_type=part_type,
            connection_ids=[connection.id for connection in conflicts],
            part_ids=[connection.part_id for connection in conflicts],
            kept=keep_existing,
        )

        if keep_existing:
            if conflicts:
                logger.info(
                    "Keeping %d existing %s connection(s) on motherboard %d",
                    len(conflicts), part_type.value, motherboard_id,
                )
            return report

        operation = f"displace the {part_type.value} on motherboard {motherboard_id} at {when.date_string}"
        for connection in conflicts:
            self.close_connection(connection, when, AUTO_DISCONNECT_NOTE, operation)
            logger.info(
                "Displaced part %d from motherboard %d at %s",
                connection.part_id, motherboard_id, when.date_string,
            )

        return report

    def preview_conflicts(self, part_id: int, motherboard_id: int) -> SlotConflictReport:
        """Report what connecting the part would displace, without changing anything."""
        part = self.db.get(Part, part_id)
        if part is None:
            raise RecordNotFoundException("Part", part_id)

        conflicts = self.find_conflicts(motherboard_id, part.type, exclude_part_id=part.id)
        return SlotConflictReport(
            motherboard_id=motherboard_id,
            part_type=part.type,
            connection_ids=[connection.id for connection in conflicts],
            part_ids=[connection.part_id for connection in conflicts],
        )
