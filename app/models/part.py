"""Part model for the rig history tracker."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text, func
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.extensions import db
from app.utils.partial_date import DatePrecision, PartialDate

if TYPE_CHECKING:
    from app.models.connection import Connection
    from app.models.disposal import Disposal


class PartType(str, Enum):
    """Kind of hardware component. Motherboards host all other kinds."""

    MOTHERBOARD = "motherboard"
    CPU = "cpu"
    GPU = "gpu"
    RAM = "ram"
    STORAGE = "storage"
    PSU = "psu"
    CASE = "case"
    COOLING = "cooling"
    MONITOR = "monitor"
    PERIPHERAL = "peripheral"
    OTHER = "other"


class PartStatus(str, Enum):
    """Derived hosting status of a part."""

    ACTIVE = "active"
    BIN = "bin"
    DELETED = "deleted"


def enum_column_type(enum_cls: type[Enum], name: str) -> SQLEnum:
    """Store an enum by value as plain text so the file format stays readable."""
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [item.value for item in members],
        native_enum=False,
    )


class Part(db.Model):  # type: ignore[name-defined]
    """Model representing a single trackable hardware component."""

    __tablename__ = "parts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    brand: Mapped[str] = mapped_column(String(255), nullable=False)
    model: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[PartType] = mapped_column(
        enum_column_type(PartType, "part_type"), nullable=False, index=True
    )
    acquisition_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    date_precision: Mapped[DatePrecision | None] = mapped_column(
        enum_column_type(DatePrecision, "date_precision"), nullable=True
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0", index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    # Read-only views: rows referencing a part are always removed with explicit
    # statements so the ORM never nulls out a foreign key behind our back.
    connections: Mapped[list["Connection"]] = relationship(
        "Connection",
        foreign_keys="Connection.part_id",
        viewonly=True,
        lazy="select",
        order_by="Connection.connected_at",
    )
    hosted_connections: Mapped[list["Connection"]] = relationship(
        "Connection",
        foreign_keys="Connection.motherboard_id",
        viewonly=True,
        lazy="select",
        order_by="Connection.connected_at",
    )
    disposals: Mapped[list["Disposal"]] = relationship(
        "Disposal", viewonly=True, lazy="select", order_by="Disposal.disposed_at"
    )

    @property
    def is_motherboard(self) -> bool:
        return self.type == PartType.MOTHERBOARD

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model}"

    @property
    def acquired(self) -> PartialDate | None:
        """Acquisition date with its precision, or None when unknown."""
        if not self.acquisition_date:
            return None
        return PartialDate.from_stored(self.acquisition_date, self.date_precision)

    def __repr__(self) -> str:
        return f"<Part {self.id}: {self.type.value} {self.brand} {self.model}>"
