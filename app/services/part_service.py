"""Part service for managing tracked hardware components."""

import logging
from dataclasses import dataclass

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from app.exceptions import InvalidInputException, RecordNotFoundException
from app.models.connection import Connection
from app.models.disposal import Disposal
from app.models.part import Part, PartStatus, PartType
from app.models.rig_name import RigIdentity, RigName
from app.services.base import BaseService
from app.services.status_service import (
    StatusService,
    active_connections_expression,
    status_expression,
    status_order_expression,
)
from app.utils.partial_date import PartialDate

logger = logging.getLogger(__name__)

SORT_COLUMNS = ("id", "brand", "model", "type", "acquisition_date", "status")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass
class PartFilters:
    """Filters for part listings. ``None`` and ``"all"`` both mean no filter."""

    type: PartType | str | None = None
    status: PartStatus | str | None = None
    search: str | None = None


@dataclass
class PartListing:
    """A part together with the state derived for it."""

    part: Part
    status: PartStatus
    active_connections: int
    rig_name: str | None = None


def _parse_type(value: PartType | str | None) -> PartType | None:
    if value is None or value == "all" or value == "":
        return None
    try:
        return PartType(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in PartType)
        raise InvalidInputException("part type", f"'{value}' is not one of {allowed}") from e


def _parse_status(value: PartStatus | str | None) -> PartStatus | None:
    if value is None or value == "all" or value == "":
        return None
    try:
        return PartStatus(value)
    except ValueError as e:
        raise InvalidInputException("status", f"'{value}' is not one of active, bin, deleted, all") from e


class PartService(BaseService):
    """Service class for part management operations."""

    def __init__(self, db: Session, status_service: StatusService):
        super().__init__(db)
        self.status_service = status_service

    def add_part(
        self,
        brand: str,
        model: str,
        type: PartType | str,
        acquired: PartialDate | None = None,
        notes: str = "",
    ) -> Part:
        """Create a new part. The acquisition date is optional."""
        part_type = _parse_type(type)
        if part_type is None:
            raise InvalidInputException("part type", "a type is required")
        brand, model = self._require_names(brand, model)

        part = Part(
            brand=brand,
            model=model,
            type=part_type,
            acquisition_date=acquired.date_string if acquired else None,
            date_precision=acquired.precision if acquired else None,
            notes=notes or "",
        )
        self.db.add(part)
        self.db.flush()  # Get the ID immediately
        logger.info("Added part %d: %s %s (%s)", part.id, brand, model, part_type.value)
        return part

    def update_part(
        self,
        part_id: int,
        brand: str,
        model: str,
        type: PartType | str,
        acquired: PartialDate | None = None,
        notes: str = "",
    ) -> Part:
        """Replace the editable fields of a part."""
        part = self.get_part(part_id)

        part_type = _parse_type(type)
        if part_type is None:
            raise InvalidInputException("part type", "a type is required")
        brand, model = self._require_names(brand, model)

        part.brand = brand
        part.model = model
        part.type = part_type
        part.acquisition_date = acquired.date_string if acquired else None
        part.date_precision = acquired.precision if acquired else None
        part.notes = notes or ""
        self.db.flush()
        return part

    @staticmethod
    def _require_names(brand: str, model: str) -> tuple[str, str]:
        brand = (brand or "").strip()
        model = (model or "").strip()
        if not brand:
            raise InvalidInputException("brand", "a brand is required")
        if not model:
            raise InvalidInputException("model", "a model is required")
        return brand, model

    def delete_part(self, part_id: int) -> Part:
        """Soft delete: flag the part deleted and keep its history."""
        part = self.get_part(part_id)
        part.is_deleted = True
        self.db.flush()
        return part

    def hard_delete_part(self, part_id: int) -> None:
        """Irreversibly delete the part together with every record referencing it."""
        self.get_part(part_id)

        with self.atomic(f"permanently delete part {part_id}"):
            self.db.execute(
                delete(Connection).where(
                    or_(Connection.part_id == part_id, Connection.motherboard_id == part_id)
                )
            )
            self.db.execute(delete(RigName).where(RigName.motherboard_id == part_id))
            self.db.execute(delete(RigIdentity).where(RigIdentity.motherboard_id == part_id))
            self.db.execute(delete(Disposal).where(Disposal.part_id == part_id))
            self.db.execute(delete(Part).where(Part.id == part_id))

        logger.warning("Permanently deleted part %d and its history", part_id)

    def get_part(self, part_id: int) -> Part:
        part = self.db.get(Part, part_id)
        if part is None:
            raise RecordNotFoundException("Part", part_id)
        return part

    def get_part_listing(self, part_id: int) -> PartListing:
        """Part with its status, open connection count and current rig name."""
        part = self.get_part(part_id)
        return PartListing(
            part=part,
            status=self.status_service.status(part),
            active_connections=self.status_service.active_connection_count(part),
            rig_name=self.status_service.current_rig_name(part.id) if part.is_motherboard else None,
        )

    def get_all_parts(
        self,
        filters: PartFilters | None = None,
        sort_column: str = "id",
        sort_direction: str = "asc",
    ) -> list[PartListing]:
        """List parts filtered by type, status and free text, sorted by one column."""
        filters = filters or PartFilters()
        part_type = _parse_type(filters.type)
        status_filter = _parse_status(filters.status)

        if sort_column not in SORT_COLUMNS:
            raise InvalidInputException("sort column", f"'{sort_column}' is not one of {', '.join(SORT_COLUMNS)}")
        sort_direction = (sort_direction or "asc").lower()
        if sort_direction not in SORT_DIRECTIONS:
            raise InvalidInputException("sort direction", f"'{sort_direction}' is not asc or desc")

        status = status_expression()
        stmt = select(Part, status.label("status"), active_connections_expression().label("active_connections"))

        if part_type is not None:
            stmt = stmt.where(Part.type == part_type)
        if status_filter is not None:
            stmt = stmt.where(status == status_filter.value)
        if filters.search:
            pattern = f"%{filters.search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    Part.brand.ilike(pattern),
                    Part.model.ilike(pattern),
                    Part.notes.ilike(pattern),
                )
            )

        stmt = stmt.order_by(*self._order_by(sort_column, sort_direction))

        listings: list[PartListing] = []
        for part, status_value, active in self.db.execute(stmt).all():
            listings.append(
                PartListing(
                    part=part,
                    status=PartStatus(status_value),
                    active_connections=active or 0,
                    rig_name=(
                        self.status_service.current_rig_name(part.id)
                        if part.is_motherboard and status_value == PartStatus.ACTIVE.value
                        else None
                    ),
                )
            )
        return listings

    @staticmethod
    def _order_by(sort_column: str, sort_direction: str) -> list:
        def directed(column):
            return column.desc() if sort_direction == "desc" else column.asc()

        if sort_column == "id":
            return [directed(Part.id)]
        if sort_column == "brand":
            return [directed(Part.brand), Part.model.asc(), Part.id.asc()]
        if sort_column == "model":
            return [directed(Part.model), Part.brand.asc(), Part.id.asc()]
        if sort_column == "type":
            return [directed(Part.type), Part.brand.asc(), Part.model.asc(), Part.id.asc()]
        if sort_column == "acquisition_date":
            return [directed(Part.acquisition_date), Part.brand.asc(), Part.model.asc(), Part.id.asc()]
        return [directed(status_order_expression()), Part.brand.asc(), Part.model.asc(), Part.id.asc()]

    def get_parts_in_bin(self, type_filter: PartType | str | None = None) -> list[Part]:
        """Parts that are neither connected nor deleted."""
        part_type = _parse_type(type_filter)
        stmt = select(Part).where(status_expression() == PartStatus.BIN.value)
        if part_type is not None:
            stmt = stmt.where(Part.type == part_type)
        stmt = stmt.order_by(Part.type, Part.brand, Part.model)
        return list(self.db.execute(stmt).scalars().all())

    def get_unique_brands(self) -> list[str]:
        stmt = select(Part.brand).distinct().order_by(Part.brand)
        return list(self.db.execute(stmt).scalars().all())
