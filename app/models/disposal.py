"""Disposal model for the rig history tracker."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db
from app.models.part import enum_column_type
from app.utils.partial_date import DatePrecision

if TYPE_CHECKING:
    from app.models.part import Part


class DisposalReason(str, Enum):
    """How a part left active use."""

    SOLD = "sold"
    GIFTED = "gifted"
    RECYCLED = "recycled"
    TRASHED = "trashed"
    RETURNED = "returned"
    LOST = "lost"
    OTHER = "other"

    @property
    def has_recipient(self) -> bool:
        return self in (DisposalReason.SOLD, DisposalReason.GIFTED, DisposalReason.RETURNED)


class Disposal(db.Model):  # type: ignore[name-defined]
    """Model recording the removal of a part from active use."""

    __tablename__ = "disposals"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    part_id: Mapped[int] = mapped_column(ForeignKey("parts.id"), nullable=False, index=True)
    disposed_at: Mapped[str] = mapped_column(String(10), nullable=False)
    disposed_precision: Mapped[DatePrecision] = mapped_column(
        enum_column_type(DatePrecision, "disposed_precision"), nullable=False
    )
    # Stored as text so rows written with free-form reasons still load.
    reason: Mapped[str] = mapped_column(String(50), nullable=False)
    recipient: Mapped[str | None] = mapped_column(String(255), nullable=True)
    price: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    part: Mapped["Part"] = relationship(  # type: ignore[assignment]
        "Part", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Disposal {self.id}: part {self.part_id} {self.reason} @ {self.disposed_at}>"
