"""Tests for disposal service functionality."""

import pytest

from app.exceptions import InvalidInputException, InvalidOperationException, RecordNotFoundException
from app.models.disposal import Disposal
from app.models.part import PartType
from app.services.container import ServiceContainer
from app.services.disposal_service import MOTHERBOARD_DISPOSAL_NOTE, PART_DISPOSAL_NOTE
from app.utils.partial_date import DatePrecision
from tests.testing_utils import add_part, connect, pd


class TestDisposePart:
    """Test cases for disposing parts."""

    def test_dispose_part(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        disposal = container.disposal_service().dispose_part(
            gpu.id, pd("2023-03"), reason="sold", recipient="A colleague", price="120 EUR"
        )

        assert isinstance(disposal, Disposal)
        assert disposal.disposed_at == "2023-03-01"
        assert disposal.disposed_precision == DatePrecision.MONTH
        assert disposal.reason == "sold"
        assert disposal.recipient == "A colleague"
        assert disposal.price == "120 EUR"
        assert gpu.is_deleted is True

    def test_default_reason(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        disposal = container.disposal_service().dispose_part(gpu.id, pd("2023"))

        assert disposal.reason == "other"

    def test_unknown_reason(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        with pytest.raises(InvalidInputException):
            container.disposal_service().dispose_part(gpu.id, pd("2023"), reason="exploded")

    def test_recipient_required_when_sold(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        with pytest.raises(InvalidInputException):
            container.disposal_service().dispose_part(gpu.id, pd("2023"), reason="gifted")

    def test_price_only_kept_for_sales(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        disposal = container.disposal_service().dispose_part(
            gpu.id, pd("2023"), reason="recycled", recipient="Depot", price="0"
        )

        assert disposal.recipient is None
        assert disposal.price is None

    def test_dispose_requires_date(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        with pytest.raises(InvalidInputException):
            container.disposal_service().dispose_part(gpu.id, None)

    def test_dispose_twice(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)
        service = container.disposal_service()
        service.dispose_part(gpu.id, pd("2023"))

        with pytest.raises(InvalidOperationException):
            service.dispose_part(gpu.id, pd("2024"))

    def test_disposing_part_closes_its_connection(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        gpu = add_part(container, PartType.GPU)
        connection = connect(container, gpu, motherboard, "2020").connection

        container.disposal_service().dispose_part(gpu.id, pd("2023-05-02"))

        assert connection.disconnected_at == "2023-05-02"
        assert PART_DISPOSAL_NOTE in connection.notes

    def test_dispose_before_connection_start_is_refused(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        gpu = add_part(container, PartType.GPU)
        connection = connect(container, gpu, motherboard, "2022-06").connection
        service = container.disposal_service()

        with pytest.raises(InvalidOperationException):
            service.dispose_part(gpu.id, pd("2021"))

        session.refresh(gpu)
        session.refresh(connection)
        assert gpu.is_deleted is False
        assert connection.is_open
        assert service.get_disposal_for_part(gpu.id) is None

    def test_disposing_motherboard_closes_hosted_connections(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        cpu = add_part(container, PartType.CPU)
        gpu = add_part(container, PartType.GPU)
        connections = [
            connect(container, cpu, motherboard, "2020").connection,
            connect(container, gpu, motherboard, "2020").connection,
        ]

        container.disposal_service().dispose_part(motherboard.id, pd("2022"), reason="trashed")

        for connection in connections:
            assert connection.disconnected_at == "2022-01-01"
            assert connection.disconnected_precision == DatePrecision.YEAR
            assert MOTHERBOARD_DISPOSAL_NOTE in connection.notes
        assert cpu.is_deleted is False


class TestRestore:
    """Test cases for restoring disposed parts."""

    def test_restore_removes_disposals(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        gpu = add_part(container, PartType.GPU)
        connection = connect(container, gpu, motherboard, "2020").connection
        service = container.disposal_service()
        service.dispose_part(gpu.id, pd("2023"))

        restored = service.restore_disposed_part(gpu.id)

        assert restored.is_deleted is False
        assert service.get_disposals_for_part(gpu.id) == []
        # Connections closed by the disposal stay closed
        assert connection.disconnected_at == "2023-01-01"

    def test_restore_is_idempotent(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        restored = container.disposal_service().restore_disposed_part(gpu.id)

        assert restored.is_deleted is False

    def test_restore_unknown_part(self, container: ServiceContainer, session):
        with pytest.raises(RecordNotFoundException):
            container.disposal_service().restore_disposed_part(999)

    def test_delete_last_disposal_restores_part(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)
        service = container.disposal_service()
        disposal = service.dispose_part(gpu.id, pd("2023"))

        service.delete_disposal(disposal.id)

        assert gpu.is_deleted is False
        assert service.get_disposal_for_part(gpu.id) is None


class TestDisposalQueries:
    """Test cases for disposal lookups and bulk disposal."""

    def test_get_all_disposals_newest_first(self, container: ServiceContainer, session):
        service = container.disposal_service()
        cpu = add_part(container, PartType.CPU)
        gpu = add_part(container, PartType.GPU)
        service.dispose_part(cpu.id, pd("2021"))
        service.dispose_part(gpu.id, pd("2023"))

        disposals = service.get_all_disposals()

        assert [disposal.part_id for disposal in disposals] == [gpu.id, cpu.id]

    def test_bulk_dispose(self, container: ServiceContainer, session):
        service = container.disposal_service()
        cpu = add_part(container, PartType.CPU)
        gpu = add_part(container, PartType.GPU)
        service.dispose_part(gpu.id, pd("2021"))

        result = service.bulk_dispose([cpu.id, gpu.id, 999], pd("2023"), reason="recycled")

        assert result.success_count == 1
        assert {failure.part_id for failure in result.failures} == {gpu.id, 999}
        assert cpu.is_deleted is True

    def test_bulk_dispose_validates_recipient_per_item(self, container: ServiceContainer, session):
        cpu = add_part(container, PartType.CPU)

        result = container.disposal_service().bulk_dispose([cpu.id], pd("2023"), reason="sold")

        assert result.success_count == 0
        assert result.failure_count == 1
