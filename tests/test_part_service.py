"""Tests for part service functionality."""

import pytest
from sqlalchemy import select

from app.exceptions import InvalidInputException, RecordNotFoundException
from app.models.connection import Connection
from app.models.disposal import Disposal
from app.models.part import Part, PartStatus, PartType
from app.services.container import ServiceContainer
from app.services.part_service import PartFilters
from app.utils.partial_date import DatePrecision
from tests.testing_utils import add_part, connect, pd


class TestPartService:
    """Test cases for PartService."""

    def test_add_part(self, container: ServiceContainer, session):
        part = container.part_service().add_part(
            brand="AMD", model="Ryzen 5 5600X", type=PartType.CPU, acquired=pd("2021-03"), notes="boxed"
        )

        assert isinstance(part, Part)
        assert part.id is not None
        assert part.acquisition_date == "2021-03-01"
        assert part.date_precision == DatePrecision.MONTH
        assert part.is_deleted is False
        assert part.notes == "boxed"

    def test_add_part_without_acquisition_date(self, container: ServiceContainer, session):
        part = container.part_service().add_part(brand="AMD", model="Ryzen 7", type="cpu")

        assert part.acquisition_date is None
        assert part.date_precision is None
        assert part.acquired is None

    def test_add_part_requires_brand_and_model(self, container: ServiceContainer, session):
        service = container.part_service()

        with pytest.raises(InvalidInputException):
            service.add_part(brand="  ", model="X", type="cpu")
        with pytest.raises(InvalidInputException):
            service.add_part(brand="AMD", model="", type="cpu")

    def test_add_part_rejects_unknown_type(self, container: ServiceContainer, session):
        with pytest.raises(InvalidInputException):
            container.part_service().add_part(brand="AMD", model="X", type="toaster")

    def test_update_part_replaces_fields(self, container: ServiceContainer, session):
        part = add_part(container, PartType.GPU, brand="Nvidia", acquired="2020")

        updated = container.part_service().update_part(
            part.id, brand="NVIDIA", model="RTX 3080", type=PartType.GPU, acquired=None, notes="FE"
        )

        assert updated.brand == "NVIDIA"
        assert updated.model == "RTX 3080"
        assert updated.acquisition_date is None
        assert updated.notes == "FE"

    def test_get_part_nonexistent(self, container: ServiceContainer, session):
        with pytest.raises(RecordNotFoundException):
            container.part_service().get_part(999)

    def test_soft_delete_keeps_history(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        cpu = add_part(container, PartType.CPU)
        connect(container, cpu, motherboard, "2020-01-01")

        container.part_service().delete_part(cpu.id)

        assert cpu.is_deleted is True
        assert session.execute(select(Connection).where(Connection.part_id == cpu.id)).scalars().all()

    def test_hard_delete_removes_dependent_records(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        cpu = add_part(container, PartType.CPU)
        connect(container, cpu, motherboard, "2020-01-01")
        container.disposal_service().dispose_part(motherboard.id, pd("2021"), reason="recycled")

        container.part_service().hard_delete_part(motherboard.id)

        assert session.get(Part, motherboard.id) is None
        assert session.execute(select(Connection)).scalars().all() == []
        assert session.execute(select(Disposal)).scalars().all() == []
        assert session.get(Part, cpu.id) is not None

    def test_get_part_listing(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        cpu = add_part(container, PartType.CPU)
        connect(container, cpu, motherboard, "2020-01-01")

        listing = container.part_service().get_part_listing(motherboard.id)

        assert listing.status == PartStatus.ACTIVE
        assert listing.active_connections == 1


class TestPartListing:
    """Filtering and sorting of the part list."""

    @pytest.fixture
    def parts(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD, brand="ASUS", model="B550", acquired="2020-01")
        cpu = add_part(container, PartType.CPU, brand="AMD", model="Ryzen 5", acquired="2020-02")
        gpu = add_part(container, PartType.GPU, brand="Nvidia", model="RTX 3070", notes="mining card")
        psu = add_part(container, PartType.PSU, brand="Corsair", model="RM750", acquired="2019")
        connect(container, cpu, motherboard, "2020-03-01")
        container.part_service().delete_part(psu.id)
        return {"motherboard": motherboard, "cpu": cpu, "gpu": gpu, "psu": psu}

    def test_filter_by_type(self, container: ServiceContainer, parts):
        listings = container.part_service().get_all_parts(PartFilters(type="cpu"))

        assert [listing.part.id for listing in listings] == [parts["cpu"].id]

    def test_filter_all_type_returns_everything(self, container: ServiceContainer, parts):
        listings = container.part_service().get_all_parts(PartFilters(type="all"))

        assert len(listings) == 4

    def test_filter_by_status(self, container: ServiceContainer, parts):
        service = container.part_service()

        active = {listing.part.id for listing in service.get_all_parts(PartFilters(status="active"))}
        in_bin = {listing.part.id for listing in service.get_all_parts(PartFilters(status="bin"))}
        deleted = {listing.part.id for listing in service.get_all_parts(PartFilters(status="deleted"))}

        assert active == {parts["motherboard"].id, parts["cpu"].id}
        assert in_bin == {parts["gpu"].id}
        assert deleted == {parts["psu"].id}

    def test_search_matches_notes_case_insensitively(self, container: ServiceContainer, parts):
        listings = container.part_service().get_all_parts(PartFilters(search="MINING"))

        assert [listing.part.id for listing in listings] == [parts["gpu"].id]

    def test_sort_by_brand_descending(self, container: ServiceContainer, parts):
        listings = container.part_service().get_all_parts(sort_column="brand", sort_direction="desc")

        assert [listing.part.brand for listing in listings] == ["Nvidia", "Corsair", "ASUS", "AMD"]

    def test_sort_by_status(self, container: ServiceContainer, parts):
        listings = container.part_service().get_all_parts(sort_column="status")

        assert [listing.status for listing in listings] == [
            PartStatus.ACTIVE, PartStatus.ACTIVE, PartStatus.BIN, PartStatus.DELETED
        ]

    def test_invalid_sort_column(self, container: ServiceContainer, parts):
        with pytest.raises(InvalidInputException):
            container.part_service().get_all_parts(sort_column="price")

    def test_invalid_status_filter(self, container: ServiceContainer, parts):
        with pytest.raises(InvalidInputException):
            container.part_service().get_all_parts(PartFilters(status="sold"))

    def test_parts_in_bin(self, container: ServiceContainer, parts):
        in_bin = container.part_service().get_parts_in_bin()

        assert [part.id for part in in_bin] == [parts["gpu"].id]
        assert container.part_service().get_parts_in_bin("cpu") == []

    def test_unique_brands(self, container: ServiceContainer, parts):
        assert container.part_service().get_unique_brands() == ["AMD", "ASUS", "Corsair", "Nvidia"]
