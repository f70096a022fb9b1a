"""Rig service for rig listings, lifecycle names and legacy identities."""

import logging
from dataclasses import dataclass, field

from sqlalchemy import delete, exists, func, select
from sqlalchemy.orm import Session

from app.exceptions import InvalidInputException, InvalidOperationException, RecordNotFoundException
from app.models.connection import Connection
from app.models.part import Part, PartType
from app.models.rig_name import RigIdentity, RigName
from app.services.base import BaseService
from app.services.identity_resolvers import IdentityResolver
from app.services.lifecycle_service import Lifecycle, LifecycleService
from app.utils.partial_date import PartialDate

logger = logging.getLogger(__name__)


@dataclass
class RigSummary:
    """A motherboard viewed as a rig in the active or historical listing."""

    motherboard: Part
    rig_name: str | None
    connected_parts: int = 0
    lifecycle: Lifecycle | None = None
    last_disconnected_at: str | None = None


@dataclass
class RigDetails:
    """A motherboard with its current parts, lifecycles and names."""

    motherboard: Part
    rig_name: str | None
    current_identity: RigIdentity | None
    active_connections: list[Connection] = field(default_factory=list)
    lifecycles: list[tuple[Lifecycle, str | None]] = field(default_factory=list)


class RigService(BaseService):
    """Service class for rig naming and rig level queries."""

    def __init__(
        self,
        db: Session,
        lifecycle_service: LifecycleService,
        identity_resolver: IdentityResolver,
    ):
        super().__init__(db)
        self.lifecycle_service = lifecycle_service
        self.identity_resolver = identity_resolver

    def get_motherboard(self, motherboard_id: int) -> Part:
        part = self.db.get(Part, motherboard_id)
        if part is None or not part.is_motherboard:
            raise RecordNotFoundException("Motherboard", motherboard_id)
        return part

    def resolve_name(self, motherboard_id: int, lifecycle: Lifecycle) -> str | None:
        """Name of a lifecycle from whichever identity store has one."""
        return self.identity_resolver.resolve(motherboard_id, lifecycle)

    def get_rig_name(self, motherboard_id: int, start_date: str) -> RigName | None:
        stmt = select(RigName).where(
            RigName.motherboard_id == motherboard_id,
            RigName.start_date == start_date,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def set_rig_name(self, motherboard_id: int, start_date: str, name: str, notes: str = "") -> RigName:
        """Create or replace the name of the lifecycle starting on ``start_date``."""
        name = (name or "").strip()
        if not name:
            raise InvalidInputException("rig name", "a name is required")
        self.get_motherboard(motherboard_id)

        operation = f"name lifecycle {start_date} of motherboard {motherboard_id}"
        starts = {lifecycle.start_date for lifecycle in self.lifecycle_service.compute_lifecycles(motherboard_id)}
        if start_date not in starts:
            raise InvalidOperationException(operation, f"no lifecycle of the motherboard starts on {start_date}")

        with self.atomic(operation):
            rig_name = self.get_rig_name(motherboard_id, start_date)
            if rig_name is None:
                rig_name = RigName(motherboard_id=motherboard_id, start_date=start_date, name=name, notes=notes or "")
                self.db.add(rig_name)
            else:
                rig_name.name = name
                rig_name.notes = notes or ""

        return rig_name

    def delete_all_rig_names(self, motherboard_id: int) -> int:
        """Remove every start-date keyed name of the motherboard. Returns the number removed."""
        with self.atomic(f"delete rig names of motherboard {motherboard_id}"):
            removed = self.db.execute(
                delete(RigName).where(RigName.motherboard_id == motherboard_id)
            ).rowcount
        return removed or 0

    def set_rig_identity(
        self, motherboard_id: int, name: str, active_from: PartialDate | None, notes: str = ""
    ) -> RigIdentity:
        """Start a new legacy identity, closing the open one at the same date."""
        name = (name or "").strip()
        if not name:
            raise InvalidInputException("rig name", "a name is required")
        if active_from is None:
            raise InvalidInputException("active from date", "a year is required")
        self.get_motherboard(motherboard_id)

        with self.atomic(f"set rig identity of motherboard {motherboard_id}"):
            open_identities = self.db.execute(
                select(RigIdentity).where(
                    RigIdentity.motherboard_id == motherboard_id,
                    RigIdentity.active_until.is_(None),
                )
            ).scalars().all()
            for identity in open_identities:
                identity.active_until = active_from.date_string
                identity.active_until_precision = active_from.precision
            # Close before inserting so the one-open-identity index holds.
            self.db.flush()

            identity = RigIdentity(
                motherboard_id=motherboard_id,
                name=name,
                active_from=active_from.date_string,
                active_from_precision=active_from.precision,
                notes=notes or "",
            )
            self.db.add(identity)

        return identity

    def get_rig_identities(self, motherboard_id: int) -> list[RigIdentity]:
        stmt = (
            select(RigIdentity)
            .where(RigIdentity.motherboard_id == motherboard_id)
            .order_by(RigIdentity.active_from.desc(), RigIdentity.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_current_rig_identity(self, motherboard_id: int) -> RigIdentity | None:
        stmt = (
            select(RigIdentity)
            .where(
                RigIdentity.motherboard_id == motherboard_id,
                RigIdentity.active_until.is_(None),
            )
            .order_by(RigIdentity.active_from.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _current_name(self, motherboard_id: int, lifecycle: Lifecycle | None) -> str | None:
        identity = self.get_current_rig_identity(motherboard_id)
        if identity is not None:
            return identity.name
        if lifecycle is None:
            return None
        return self.resolve_name(motherboard_id, lifecycle)

    def get_active_rigs(self) -> list[RigSummary]:
        """Non-deleted motherboards with at least one open connection."""
        open_count = (
            select(func.count(Connection.id))
            .where(Connection.motherboard_id == Part.id, Connection.disconnected_at.is_(None))
            .correlate(Part)
            .scalar_subquery()
        )
        stmt = (
            select(Part, open_count)
            .where(
                Part.type == PartType.MOTHERBOARD,
                Part.is_deleted.is_(False),
                open_count > 0,
            )
            .order_by(Part.brand, Part.model, Part.id)
        )

        rigs: list[RigSummary] = []
        for motherboard, connected in self.db.execute(stmt).all():
            lifecycle = self.lifecycle_service.get_active_lifecycle(motherboard.id)
            rigs.append(
                RigSummary(
                    motherboard=motherboard,
                    rig_name=self._current_name(motherboard.id, lifecycle),
                    connected_parts=connected,
                    lifecycle=lifecycle,
                )
            )

        # Named rigs first, alphabetically, then unnamed ones by brand and model.
        rigs.sort(key=lambda rig: (rig.rig_name is None, (rig.rig_name or "").lower()))
        return rigs

    def get_historical_rigs(self) -> list[RigSummary]:
        """Non-deleted motherboards that hosted parts but host none now."""
        has_connections = exists().where(Connection.motherboard_id == Part.id).correlate(Part)
        has_open = (
            exists()
            .where(Connection.motherboard_id == Part.id, Connection.disconnected_at.is_(None))
            .correlate(Part)
        )
        last_disconnect = (
            select(func.max(Connection.disconnected_at))
            .where(Connection.motherboard_id == Part.id)
            .correlate(Part)
            .scalar_subquery()
        )
        stmt = (
            select(Part, last_disconnect)
            .where(
                Part.type == PartType.MOTHERBOARD,
                Part.is_deleted.is_(False),
                has_connections,
                ~has_open,
            )
            .order_by(last_disconnect.desc(), Part.id)
        )

        rigs: list[RigSummary] = []
        for motherboard, last_disconnected_at in self.db.execute(stmt).all():
            lifecycles = self.lifecycle_service.compute_lifecycles(motherboard.id)
            last = lifecycles[-1] if lifecycles else None
            rigs.append(
                RigSummary(
                    motherboard=motherboard,
                    rig_name=self.resolve_name(motherboard.id, last) if last else None,
                    lifecycle=last,
                    last_disconnected_at=last_disconnected_at,
                )
            )
        return rigs

    def get_rig_details(self, motherboard_id: int) -> RigDetails:
        motherboard = self.get_motherboard(motherboard_id)
        lifecycles = self.lifecycle_service.compute_lifecycles(motherboard_id)
        active = lifecycles[-1] if lifecycles and lifecycles[-1].active else None

        active_connections = self.db.execute(
            select(Connection)
            .join(Part, Connection.part_id == Part.id)
            .where(Connection.motherboard_id == motherboard_id, Connection.disconnected_at.is_(None))
            .order_by(Part.type, Part.brand, Part.model)
        ).scalars().all()

        return RigDetails(
            motherboard=motherboard,
            rig_name=self._current_name(motherboard_id, active),
            current_identity=self.get_current_rig_identity(motherboard_id),
            active_connections=list(active_connections),
            lifecycles=[(lifecycle, self.resolve_name(motherboard_id, lifecycle)) for lifecycle in lifecycles],
        )
