"""Tests for disposal API endpoints."""

from flask.testing import FlaskClient

from tests.testing_utils import create_part


def dispose(client: FlaskClient, part_id: int, **body):
    body.setdefault("disposed", {"year": 2023, "month": 3})
    return client.post(f"/api/disposals/parts/{part_id}", json=body)


class TestDisposalsAPI:
    """Test cases for Disposal API endpoints."""

    def test_dispose_sold_part(self, client: FlaskClient):
        gpu = create_part(client, "gpu")

        response = dispose(client, gpu["id"], reason="sold", recipient="A colleague", price="120 EUR")

        assert response.status_code == 201
        assert response.json["disposed_at"] == "2023-03-01"
        assert response.json["disposed_precision"] == "month"
        assert response.json["reason"] == "sold"
        assert response.json["recipient"] == "A colleague"
        assert response.json["price"] == "120 EUR"
        assert client.get(f"/api/parts/{gpu['id']}").json["status"] == "deleted"

    def test_dispose_uses_default_reason(self, client: FlaskClient):
        gpu = create_part(client, "gpu")

        response = dispose(client, gpu["id"], price="50")

        assert response.json["reason"] == "other"
        assert response.json["price"] is None

    def test_dispose_sold_without_recipient(self, client: FlaskClient):
        gpu = create_part(client, "gpu")

        response = dispose(client, gpu["id"], reason="sold")

        assert response.status_code == 400
        assert "recipient" in response.json["error"]

    def test_dispose_twice(self, client: FlaskClient):
        gpu = create_part(client, "gpu")
        dispose(client, gpu["id"], reason="recycled")

        response = dispose(client, gpu["id"], reason="recycled")

        assert response.status_code == 409

    def test_dispose_closes_connections(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu")
        client.post(
            "/api/connections",
            json={"part_id": cpu["id"], "motherboard_id": motherboard["id"], "connected": {"year": 2020}},
        )

        dispose(client, motherboard["id"], reason="trashed", disposed={"year": 2024})

        connections = client.get(f"/api/connections/motherboards/{motherboard['id']}").json
        assert connections[0]["disconnected_at"] == "2024-01-01"
        assert client.get(f"/api/parts/{cpu['id']}").json["status"] == "bin"

    def test_latest_and_list(self, client: FlaskClient):
        gpu = create_part(client, "gpu")
        cpu = create_part(client, "cpu")

        missing = client.get(f"/api/disposals/parts/{gpu['id']}/latest")
        dispose(client, gpu["id"], reason="recycled", disposed={"year": 2022})
        dispose(client, cpu["id"], reason="lost", disposed={"year": 2023})
        latest = client.get(f"/api/disposals/parts/{gpu['id']}/latest")
        all_disposals = client.get("/api/disposals")
        part_disposals = client.get(f"/api/disposals/parts/{cpu['id']}")

        assert missing.status_code == 404
        assert latest.json["reason"] == "recycled"
        assert [disposal["part_id"] for disposal in all_disposals.json] == [cpu["id"], gpu["id"]]
        assert [disposal["reason"] for disposal in part_disposals.json] == ["lost"]

    def test_delete_disposal_restores_part(self, client: FlaskClient):
        gpu = create_part(client, "gpu")
        disposal = dispose(client, gpu["id"], reason="recycled").json

        response = client.delete(f"/api/disposals/{disposal['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/parts/{gpu['id']}").json["status"] == "bin"
        assert client.delete(f"/api/disposals/{disposal['id']}").status_code == 404

    def test_restore_disposed_part(self, client: FlaskClient):
        gpu = create_part(client, "gpu")
        dispose(client, gpu["id"], reason="recycled")

        response = client.post(f"/api/parts/{gpu['id']}/restore")

        assert response.status_code == 200
        assert response.json["is_deleted"] is False
        assert client.get("/api/disposals").json == []

    def test_bulk_dispose(self, client: FlaskClient):
        gpu = create_part(client, "gpu")
        cpu = create_part(client, "cpu")
        dispose(client, cpu["id"], reason="recycled")

        response = client.post(
            "/api/disposals/bulk",
            json={"part_ids": [gpu["id"], cpu["id"]], "disposed": {"year": 2024}, "reason": "recycled"},
        )

        assert response.status_code == 200
        assert response.json["success_count"] == 1
        assert response.json["failure_count"] == 1
        assert response.json["failures"][0]["part_id"] == cpu["id"]
