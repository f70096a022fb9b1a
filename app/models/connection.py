"""Connection model for the rig history tracker."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db
from app.models.part import enum_column_type
from app.utils.partial_date import DatePrecision, PartialDate

if TYPE_CHECKING:
    from app.models.part import Part


class Connection(db.Model):  # type: ignore[name-defined]
    """Interval [connected_at, disconnected_at) during which a part sat on a motherboard."""

    __tablename__ = "connections"
    __table_args__ = (
        CheckConstraint("part_id != motherboard_id", name="ck_connections_distinct_endpoints"),
        CheckConstraint(
            "(disconnected_at IS NULL) = (disconnected_precision IS NULL)",
            name="ck_connections_disconnect_precision",
        ),
        Index("ix_connections_part_open", "part_id", "disconnected_at"),
        Index("ix_connections_motherboard_open", "motherboard_id", "disconnected_at"),
        Index(
            "uq_connections_part_one_open",
            "part_id",
            unique=True,
            sqlite_where=text("disconnected_at IS NULL"),
            postgresql_where=text("disconnected_at IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    motherboard_id: Mapped[int] = mapped_column(ForeignKey("parts.id"), nullable=False)
    part_id: Mapped[int] = mapped_column(ForeignKey("parts.id"), nullable=False)
    connected_at: Mapped[str] = mapped_column(String(10), nullable=False)
    connected_precision: Mapped[DatePrecision] = mapped_column(
        enum_column_type(DatePrecision, "connected_precision"), nullable=False
    )
    disconnected_at: Mapped[str | None] = mapped_column(String(10), nullable=True)
    disconnected_precision: Mapped[DatePrecision | None] = mapped_column(
        enum_column_type(DatePrecision, "disconnected_precision"), nullable=True
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    part: Mapped["Part"] = relationship(  # type: ignore[assignment]
        "Part", foreign_keys=[part_id], lazy="selectin"
    )
    motherboard: Mapped["Part"] = relationship(  # type: ignore[assignment]
        "Part", foreign_keys=[motherboard_id], lazy="selectin"
    )

    @property
    def is_open(self) -> bool:
        return self.disconnected_at is None

    def ends_before_start(self, when: PartialDate) -> bool:
        return when.date_string < self.connected_at

    def close(self, when: PartialDate, note: str = "") -> None:
        """Set the disconnect date and append a note line to the existing notes."""
        self.disconnected_at = when.date_string
        self.disconnected_precision = when.precision
        self.append_note(note)

    def append_note(self, note: str) -> None:
        if not note:
            return
        self.notes = f"{self.notes}\n{note}" if self.notes else note

    def __repr__(self) -> str:
        until = self.disconnected_at or "now"
        return f"<Connection {self.id}: part {self.part_id} on {self.motherboard_id} [{self.connected_at}, {until})>"
