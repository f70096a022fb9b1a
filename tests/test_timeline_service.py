"""Tests for part timeline projection and event deletion."""

import pytest

from app.exceptions import InvalidInputException, InvalidOperationException, RecordNotFoundException
from app.models.connection import Connection
from app.models.part import PartType
from app.services.container import ServiceContainer
from app.services.timeline_service import TimelineEventKind
from app.utils.partial_date import DatePrecision
from tests.testing_utils import add_part, connect, disconnect, pd


@pytest.fixture
def history(container: ServiceContainer, session):
    """A CPU acquired in 2019, used in a named rig and later sold."""
    motherboard = add_part(container, PartType.MOTHERBOARD, brand="ASUS", model="B550")
    cpu = add_part(container, PartType.CPU, brand="AMD", model="Ryzen 5", acquired="2019-11")
    connect(container, cpu, motherboard, "2020-01-01")
    container.rig_service().set_rig_name(motherboard.id, "2020-01-01", "Gaming Rig")
    disconnect(container, cpu, "2021-03-15")
    container.disposal_service().dispose_part(cpu.id, pd("2021-04"), reason="sold", recipient="Neighbour")
    return {"motherboard": motherboard, "cpu": cpu}


class TestBuildTimeline:
    """Timeline events are projected, ordered and described."""

    def test_events_in_chronological_order(self, container: ServiceContainer, history):
        events = container.timeline_service().build_timeline(history["cpu"].id)

        assert [event.kind for event in events] == [
            TimelineEventKind.ACQUISITION,
            TimelineEventKind.CONNECTED,
            TimelineEventKind.DISCONNECTED,
            TimelineEventKind.DISPOSED,
        ]
        assert [event.date for event in events] == ["2019-11-01", "2020-01-01", "2021-03-15", "2021-04-01"]
        assert events[0].precision == DatePrecision.MONTH

    def test_event_descriptions(self, container: ServiceContainer, history):
        events = container.timeline_service().build_timeline(history["cpu"].id)

        assert events[0].title == "Part Acquired"
        assert events[0].content == "The AMD Ryzen 5 was acquired."
        assert events[1].title == "Connected to Motherboard"
        assert events[1].content == 'Connected to ASUS B550 (Part of "Gaming Rig" rig)'
        assert events[2].title == "Disconnected from Motherboard"
        assert events[3].title == "Part Disposed"
        assert events[3].content == "The part was disposed: sold"

    def test_motherboard_timeline_lists_hosted_parts(self, container: ServiceContainer, history):
        events = container.timeline_service().build_timeline(history["motherboard"].id)

        assert [event.title for event in events] == ["Part Connected", "Part Disconnected"]
        assert events[0].content.startswith("Hosted AMD Ryzen 5")

    def test_part_without_records_has_empty_timeline(self, container: ServiceContainer, session):
        gpu = add_part(container, PartType.GPU)

        assert container.timeline_service().build_timeline(gpu.id) == []

    def test_unknown_part(self, container: ServiceContainer, session):
        with pytest.raises(RecordNotFoundException):
            container.timeline_service().build_timeline(999)


class TestDeleteTimelineEvent:
    """Deleting an event mutates the record it was projected from."""

    def test_delete_acquisition(self, container: ServiceContainer, history):
        cpu = history["cpu"]

        container.timeline_service().delete_timeline_event(cpu.id, "acquisition", "2019-11-01")

        assert cpu.acquisition_date is None
        assert cpu.date_precision is None

    def test_delete_acquisition_with_wrong_date(self, container: ServiceContainer, history):
        with pytest.raises(RecordNotFoundException):
            container.timeline_service().delete_timeline_event(history["cpu"].id, "acquisition", "2019-12-01")

    def test_delete_disposal_restores_part(self, container: ServiceContainer, history):
        cpu = history["cpu"]

        container.timeline_service().delete_timeline_event(cpu.id, "disposed", "2021-04-01")

        assert cpu.is_deleted is False
        assert container.disposal_service().get_disposal_for_part(cpu.id) is None

    def test_delete_disconnect_reopens_connection(self, container: ServiceContainer, history, session):
        cpu = history["cpu"]
        container.disposal_service().restore_disposed_part(cpu.id)

        container.timeline_service().delete_timeline_event(cpu.id, "disconnected", "2021-03-15")

        connection = session.query(Connection).filter_by(part_id=cpu.id).one()
        assert connection.disconnected_at is None
        assert connection.disconnected_precision is None

    def test_delete_disconnect_refused_while_connected_elsewhere(self, container: ServiceContainer, history):
        cpu = history["cpu"]
        container.disposal_service().restore_disposed_part(cpu.id)
        other_board = add_part(container, PartType.MOTHERBOARD)
        connect(container, cpu, other_board, "2022")

        with pytest.raises(InvalidOperationException):
            container.timeline_service().delete_timeline_event(cpu.id, "disconnected", "2021-03-15")

    def test_delete_open_connection(self, container: ServiceContainer, session):
        motherboard = add_part(container, PartType.MOTHERBOARD)
        gpu = add_part(container, PartType.GPU)
        connect(container, gpu, motherboard, "2022-07-01")

        container.timeline_service().delete_timeline_event(gpu.id, TimelineEventKind.CONNECTED, "2022-07-01")

        assert container.connection_service().get_connections_for_part(gpu.id) == []

    def test_delete_closed_connect_event_is_not_found(self, container: ServiceContainer, history):
        with pytest.raises(RecordNotFoundException):
            container.timeline_service().delete_timeline_event(history["cpu"].id, "connected", "2020-01-01")

    def test_invalid_kind(self, container: ServiceContainer, history):
        with pytest.raises(InvalidInputException):
            container.timeline_service().delete_timeline_event(history["cpu"].id, "repaired", "2020-01-01")
