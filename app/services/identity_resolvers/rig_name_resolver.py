"""Resolver for names keyed by the exact lifecycle start date."""

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.rig_name import RigName

from .base import IdentityResolver

if TYPE_CHECKING:
    from app.services.lifecycle_service import Lifecycle


class RigNameResolver(IdentityResolver):
    """Looks up ``rig_names`` by (motherboard, lifecycle start date).

    Lifecycle boundaries are recomputed deterministically from the connection
    log, so the start date is a stable key across recomputation.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, motherboard_id: int, lifecycle: "Lifecycle") -> str | None:
        stmt = select(RigName.name).where(
            RigName.motherboard_id == motherboard_id,
            RigName.start_date == lifecycle.start_date,
        )
        return self.db.execute(stmt).scalar_one_or_none()
