"""Prometheus metrics service for collecting and exposing application metrics."""

import logging
from abc import ABC, abstractmethod

from prometheus_client import Counter, Gauge, generate_latest

logger = logging.getLogger(__name__)


class MetricsServiceProtocol(ABC):
    """Protocol for metrics service implementations."""

    @abstractmethod
    def initialize_metrics(self):
        """Initialize metric objects."""
        pass

    @abstractmethod
    def record_connection_event(self, event: str, count: int = 1) -> None:
        """Record connect and disconnect events."""
        pass

    @abstractmethod
    def record_auto_displacement(self, count: int) -> None:
        """Record connections closed because a new part took their slot."""
        pass

    @abstractmethod
    def record_disposal(self, reason: str) -> None:
        """Record a part disposal."""
        pass

    @abstractmethod
    def record_restore(self) -> None:
        """Record a disposed part being restored."""
        pass

    @abstractmethod
    def record_bulk_item_failure(self, operation: str) -> None:
        """Record a single failed item inside a bulk operation."""
        pass

    @abstractmethod
    def update_part_status_counts(self, counts: dict[str, int]) -> None:
        """Refresh the per-status part gauges."""
        pass

    @abstractmethod
    def get_metrics_text(self) -> str:
        """Get metrics in Prometheus text format."""
        pass


class MetricsService(MetricsServiceProtocol):
    """Service class for Prometheus metrics collection and exposure."""

    def __init__(self):
        self.initialize_metrics()

    def initialize_metrics(self):
        """Define all Prometheus metric objects."""
        # Check if already initialized (for container singleton reuse)
        if hasattr(self, 'rig_connection_events_total'):
            return

        self.rig_connection_events_total = Counter(
            'rig_connection_events_total',
            'Connections opened and closed',
            ['event']
        )

        self.rig_auto_displacements_total = Counter(
            'rig_auto_displacements_total',
            'Connections closed automatically by a same-type part connection'
        )

        self.rig_disposals_total = Counter(
            'rig_disposals_total',
            'Parts disposed',
            ['reason']
        )

        self.rig_restores_total = Counter(
            'rig_restores_total',
            'Disposed parts restored'
        )

        self.rig_bulk_item_failures_total = Counter(
            'rig_bulk_item_failures_total',
            'Items that failed inside bulk operations',
            ['operation']
        )

        self.rig_parts_by_status = Gauge(
            'rig_parts_by_status',
            'Parts per derived status',
            ['status']
        )

    def record_connection_event(self, event: str, count: int = 1) -> None:
        """Record connection events.

        Args:
            event: 'connected' or 'disconnected'
            count: Number of connections affected
        """
        if count <= 0:
            return
        try:
            self.rig_connection_events_total.labels(event=event).inc(count)
        except Exception as exc:
            logger.error("Error recording connection event metric: %s", exc)

    def record_auto_displacement(self, count: int) -> None:
        if count <= 0:
            return
        try:
            self.rig_auto_displacements_total.inc(count)
        except Exception as exc:
            logger.error("Error recording auto displacement metric: %s", exc)

    def record_disposal(self, reason: str) -> None:
        try:
            self.rig_disposals_total.labels(reason=reason).inc()
        except Exception as exc:
            logger.error("Error recording disposal metric: %s", exc)

    def record_restore(self) -> None:
        try:
            self.rig_restores_total.inc()
        except Exception as exc:
            logger.error("Error recording restore metric: %s", exc)

    def record_bulk_item_failure(self, operation: str) -> None:
        try:
            self.rig_bulk_item_failures_total.labels(operation=operation).inc()
        except Exception as exc:
            logger.error("Error recording bulk failure metric: %s", exc)

    def update_part_status_counts(self, counts: dict[str, int]) -> None:
        """Replace the per-status gauges with fresh counts."""
        try:
            self.rig_parts_by_status.clear()
            for status, count in counts.items():
                self.rig_parts_by_status.labels(status=status).set(count)
        except Exception as exc:
            logger.error("Error updating part status metrics: %s", exc)

    def get_metrics_text(self) -> str:
        """Generate metrics in Prometheus text format.

        Returns:
            Metrics data in Prometheus exposition format
        """
        return generate_latest().decode('utf-8')
