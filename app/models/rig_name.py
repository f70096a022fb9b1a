"""Rig name overlay models for the rig history tracker."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db
from app.models.part import enum_column_type
from app.utils.partial_date import DatePrecision

if TYPE_CHECKING:
    from app.models.part import Part


class RigName(db.Model):  # type: ignore[name-defined]
    """Name for one computed lifecycle of a motherboard, keyed by its start date."""

    __tablename__ = "rig_names"
    __table_args__ = (
        UniqueConstraint("motherboard_id", "start_date", name="uq_rig_names_lifecycle"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    motherboard_id: Mapped[int] = mapped_column(ForeignKey("parts.id"), nullable=False)
    start_date: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    motherboard: Mapped["Part"] = relationship(  # type: ignore[assignment]
        "Part", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<RigName {self.motherboard_id}@{self.start_date}: {self.name}>"


class RigIdentity(db.Model):  # type: ignore[name-defined]
    """Legacy interval-based rig name, active over [active_from, active_until)."""

    __tablename__ = "rig_identities"
    __table_args__ = (
        Index(
            "uq_rig_identities_one_open",
            "motherboard_id",
            unique=True,
            sqlite_where=text("active_until IS NULL"),
            postgresql_where=text("active_until IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    motherboard_id: Mapped[int] = mapped_column(ForeignKey("parts.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    active_from: Mapped[str] = mapped_column(String(10), nullable=False)
    active_from_precision: Mapped[DatePrecision] = mapped_column(
        enum_column_type(DatePrecision, "active_from_precision"), nullable=False
    )
    active_until: Mapped[str | None] = mapped_column(String(10), nullable=True)
    active_until_precision: Mapped[DatePrecision | None] = mapped_column(
        enum_column_type(DatePrecision, "active_until_precision"), nullable=True
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    motherboard: Mapped["Part"] = relationship(  # type: ignore[assignment]
        "Part", lazy="selectin"
    )

    def __repr__(self) -> str:
        until = self.active_until or "now"
        return f"<RigIdentity {self.motherboard_id} [{self.active_from}, {until}): {self.name}>"
