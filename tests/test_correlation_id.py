"""Tests for correlation ID handling."""

from unittest.mock import patch

from flask import Flask
from flask.testing import FlaskClient

from app.utils import get_current_correlation_id


class TestCorrelationIdPropagation:
    """Request ids reach the service layer through flask-log-request-id."""

    def test_correlation_id_propagation_to_services(self, app: Flask, client: FlaskClient):
        captured = {}

        def capture_correlation_id(*args, **kwargs):
            captured["id"] = get_current_correlation_id()
            return []

        with patch(
            "app.services.part_service.PartService.get_unique_brands",
            side_effect=capture_correlation_id,
        ):
            response = client.get("/api/parts/brands", headers={"X-Request-Id": "service-propagation-202"})

        assert response.status_code == 200
        assert captured["id"] == "service-propagation-202"

    def test_correlation_id_generated_when_missing(self, app: Flask, client: FlaskClient):
        captured = {}

        def capture_correlation_id(*args, **kwargs):
            captured["id"] = get_current_correlation_id()
            return []

        with patch(
            "app.services.part_service.PartService.get_unique_brands",
            side_effect=capture_correlation_id,
        ):
            client.get("/api/parts/brands")

        assert captured["id"]


class TestCorrelationIdUtils:
    """Test correlation ID utility functions."""

    def test_get_current_correlation_id_without_request_context(self):
        assert get_current_correlation_id() is None
