"""Disposal service recording and reverting the removal of parts from use."""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.config import Settings
from app.exceptions import (
    BusinessLogicException,
    InvalidInputException,
    InvalidOperationException,
    RecordNotFoundException,
)
from app.models.connection import Connection
from app.models.disposal import Disposal, DisposalReason
from app.models.part import Part
from app.services.base import BaseService
from app.services.connection_service import BulkFailure, BulkResult
from app.services.metrics_service import MetricsServiceProtocol
from app.utils.partial_date import PartialDate

logger = logging.getLogger(__name__)

MOTHERBOARD_DISPOSAL_NOTE = "Automatically disconnected due to motherboard disposal"
PART_DISPOSAL_NOTE = "Automatically disconnected due to part disposal"


class DisposalService(BaseService):
    """Service class for disposing and restoring parts."""

    def __init__(self, db: Session, config: Settings, metrics_service: MetricsServiceProtocol):
        super().__init__(db)
        self.config = config
        self.metrics_service = metrics_service

    def _get_part(self, part_id: int) -> Part:
        part = self.db.get(Part, part_id)
        if part is None:
            raise RecordNotFoundException("Part", part_id)
        return part

    def _parse_reason(self, reason: DisposalReason | str | None) -> DisposalReason:
        if reason is None or reason == "":
            reason = self.config.DEFAULT_DISPOSAL_REASON
        try:
            return DisposalReason(reason)
        except ValueError as e:
            allowed = ", ".join(member.value for member in DisposalReason)
            raise InvalidInputException(
                "disposal reason", f"'{reason}' is not one of {allowed}"
            ) from e

    def dispose_part(
        self,
        part_id: int,
        when: PartialDate | None,
        reason: DisposalReason | str | None = None,
        notes: str = "",
        recipient: str | None = None,
        price: str | None = None,
    ) -> Disposal:
        """Record a disposal, closing every open connection the part takes part in."""
        if when is None:
            raise InvalidInputException("disposal date", "a year is required")
        disposal_reason = self._parse_reason(reason)
        recipient = (recipient or "").strip() or None
        if disposal_reason.has_recipient and not recipient:
            raise InvalidInputException(
                "recipient", f"a recipient is required when a part is {disposal_reason.value}"
            )

        part = self._get_part(part_id)
        operation = f"dispose part {part_id}"

        with self.atomic(operation):
            if part.is_deleted and self.get_disposal_for_part(part_id) is not None:
                raise InvalidOperationException(operation, "it has already been disposed")

            closed = 0
            if part.is_motherboard:
                hosted = self.db.execute(
                    select(Connection).where(
                        Connection.motherboard_id == part_id,
                        Connection.disconnected_at.is_(None),
                    )
                ).scalars().all()
                for connection in hosted:
                    self.close_connection(connection, when, MOTHERBOARD_DISPOSAL_NOTE, operation)
                closed += len(hosted)

            own = self.db.execute(
                select(Connection).where(
                    Connection.part_id == part_id,
                    Connection.disconnected_at.is_(None),
                )
            ).scalars().all()
            for connection in own:
                self.close_connection(connection, when, PART_DISPOSAL_NOTE, operation)
            closed += len(own)

            disposal = Disposal(
                part_id=part_id,
                disposed_at=when.date_string,
                disposed_precision=when.precision,
                reason=disposal_reason.value,
                recipient=recipient if disposal_reason.has_recipient else None,
                price=(price or None) if disposal_reason == DisposalReason.SOLD else None,
                notes=notes or "",
            )
            self.db.add(disposal)
            part.is_deleted = True

        logger.info(
            "Disposed part %d (%s) at %s, closing %d connection(s)",
            part_id, disposal_reason.value, when, closed,
        )
        self.metrics_service.record_disposal(disposal_reason.value)
        self.metrics_service.record_connection_event("disconnected", closed)
        return disposal

    def restore_disposed_part(self, part_id: int) -> Part:
        """Delete all disposals of the part and clear its deleted flag.

        Calling this for a part without disposals is a no-op. Connections closed
        by the disposal stay closed.
        """
        part = self._get_part(part_id)

        with self.atomic(f"restore part {part_id}"):
            removed = self.db.execute(
                delete(Disposal).where(Disposal.part_id == part_id)
            ).rowcount
            part.is_deleted = False

        if removed:
            logger.info("Restored part %d, removing %d disposal(s)", part_id, removed)
            self.metrics_service.record_restore()
        return part

    def delete_disposal(self, disposal_id: int) -> None:
        """Remove one disposal; the part is restored once none remain."""
        disposal = self.db.get(Disposal, disposal_id)
        if disposal is None:
            raise RecordNotFoundException("Disposal", disposal_id)
        part_id = disposal.part_id

        with self.atomic(f"delete disposal {disposal_id}"):
            self.db.execute(delete(Disposal).where(Disposal.id == disposal_id))
            remaining = self.db.execute(
                select(func.count(Disposal.id)).where(Disposal.part_id == part_id)
            ).scalar()
            if not remaining:
                self._get_part(part_id).is_deleted = False

    def get_disposal_for_part(self, part_id: int) -> Disposal | None:
        """Latest disposal of the part by date."""
        stmt = (
            select(Disposal)
            .where(Disposal.part_id == part_id)
            .order_by(Disposal.disposed_at.desc(), Disposal.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_disposals_for_part(self, part_id: int) -> list[Disposal]:
        stmt = (
            select(Disposal)
            .where(Disposal.part_id == part_id)
            .order_by(Disposal.disposed_at.desc(), Disposal.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_all_disposals(self) -> list[Disposal]:
        stmt = select(Disposal).order_by(Disposal.disposed_at.desc(), Disposal.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def bulk_dispose(
        self,
        part_ids: Iterable[int],
        when: PartialDate | None,
        reason: DisposalReason | str | None = None,
        notes: str = "",
        recipient: str | None = None,
        price: str | None = None,
    ) -> BulkResult:
        """Dispose several parts under one date and reason, each in its own savepoint."""
        if when is None:
            raise InvalidInputException("disposal date", "a year is required")

        result = BulkResult()
        for part_id in part_ids:
            try:
                self.dispose_part(part_id, when, reason, notes, recipient, price)
            except BusinessLogicException as e:
                logger.info("Bulk dispose skipped part %d: %s", part_id, e.message)
                result.failures.append(BulkFailure(part_id=part_id, message=e.message))
                self.metrics_service.record_bulk_item_failure("dispose")
                continue
            result.success_count += 1

        return result
