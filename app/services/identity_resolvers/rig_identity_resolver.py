"""Resolver for the legacy interval based rig identities."""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.rig_name import RigIdentity

from .base import IdentityResolver

if TYPE_CHECKING:
    from app.services.lifecycle_service import Lifecycle


class RigIdentityResolver(IdentityResolver):
    """Matches ``rig_identities`` whose active interval overlaps the lifecycle."""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, motherboard_id: int, lifecycle: "Lifecycle") -> str | None:
        # An open lifecycle runs until today.
        upper = lifecycle.end_date or date.today().isoformat()

        stmt = (
            select(RigIdentity.name)
            .where(
                RigIdentity.motherboard_id == motherboard_id,
                RigIdentity.active_from <= upper,
                or_(
                    RigIdentity.active_until.is_(None),
                    RigIdentity.active_until >= lifecycle.start_date,
                ),
            )
            .order_by(RigIdentity.active_from.desc(), RigIdentity.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()
