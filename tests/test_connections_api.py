"""Tests for connection API endpoints."""

from flask.testing import FlaskClient

from tests.testing_utils import create_part


def connect(client: FlaskClient, part_id: int, motherboard_id: int, **extra):
    return client.post("/api/connections", json={"part_id": part_id, "motherboard_id": motherboard_id, **extra})


class TestConnectionsAPI:
    """Test cases for Connection API endpoints."""

    def test_connect_part(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard", brand="ASUS", model="B550")
        cpu = create_part(client, "cpu", brand="AMD", model="Ryzen 5")

        response = connect(client, cpu["id"], motherboard["id"], connected={"year": 2021, "month": 6})

        assert response.status_code == 201
        data = response.json
        assert data["connection"]["connected_at"] == "2021-06-01"
        assert data["connection"]["connected_precision"] == "month"
        assert data["connection"]["is_open"] is True
        assert data["connection"]["part"]["model"] == "Ryzen 5"
        assert data["connection"]["motherboard"]["brand"] == "ASUS"
        assert data["conflicts"]["has_conflicts"] is False

    def test_connect_uses_acquisition_date(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu", acquired={"year": 2019})

        response = connect(client, cpu["id"], motherboard["id"])

        assert response.status_code == 201
        assert response.json["connection"]["connected_at"] == "2019-01-01"
        assert response.json["connection"]["connected_precision"] == "year"

    def test_connect_without_date_or_acquisition(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu")

        response = connect(client, cpu["id"], motherboard["id"])

        assert response.status_code == 400

    def test_connect_to_non_motherboard(self, client: FlaskClient):
        gpu = create_part(client, "gpu")
        cpu = create_part(client, "cpu")

        response = connect(client, cpu["id"], gpu["id"], connected={"year": 2021})

        assert response.status_code == 409
        assert "is not a motherboard" in response.json["error"]

    def test_connect_unknown_part(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")

        response = connect(client, 999, motherboard["id"], connected={"year": 2021})

        assert response.status_code == 404

    def test_connect_displaces_same_type(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        old_gpu = create_part(client, "gpu")
        new_gpu = create_part(client, "gpu")
        connect(client, old_gpu["id"], motherboard["id"], connected={"year": 2020})

        preview = client.get(f"/api/connections/preview?part_id={new_gpu['id']}&motherboard_id={motherboard['id']}")
        response = connect(client, new_gpu["id"], motherboard["id"], connected={"year": 2021})

        assert preview.json["part_ids"] == [old_gpu["id"]]
        assert response.json["conflicts"]["part_ids"] == [old_gpu["id"]]
        old_connections = client.get(f"/api/connections/parts/{old_gpu['id']}").json
        assert old_connections[0]["disconnected_at"] == "2021-01-01"

    def test_connect_keep_existing(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        ram_a = create_part(client, "ram")
        ram_b = create_part(client, "ram")
        connect(client, ram_a["id"], motherboard["id"], connected={"year": 2020})

        response = connect(client, ram_b["id"], motherboard["id"], connected={"year": 2020}, keep_existing=True)

        assert response.json["conflicts"]["kept"] is True
        active = client.get(f"/api/connections/motherboards/{motherboard['id']}?active=true")
        assert len(active.json) == 2

    def test_disconnect_part(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu")
        connect(client, cpu["id"], motherboard["id"], connected={"year": 2020})

        response = client.post(
            f"/api/connections/parts/{cpu['id']}/disconnect",
            json={"disconnected": {"year": 2022, "month": 5, "day": 4}, "notes": "upgrade"},
        )

        assert response.status_code == 200
        assert response.json[0]["disconnected_at"] == "2022-05-04"
        assert response.json[0]["is_open"] is False
        assert client.get(f"/api/parts/{cpu['id']}").json["status"] == "bin"

    def test_disconnect_unconnected_part(self, client: FlaskClient):
        cpu = create_part(client, "cpu")

        response = client.post(f"/api/connections/parts/{cpu['id']}/disconnect", json={"disconnected": {"year": 2022}})

        assert response.status_code == 409

    def test_disconnect_without_year(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu")
        connect(client, cpu["id"], motherboard["id"], connected={"year": 2020})

        response = client.post(f"/api/connections/parts/{cpu['id']}/disconnect", json={"disconnected": {}})

        assert response.status_code == 400

    def test_disconnect_and_delete_connection_by_id(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu")
        connection_id = connect(client, cpu["id"], motherboard["id"], connected={"year": 2020}).json["connection"]["id"]

        disconnected = client.post(f"/api/connections/{connection_id}/disconnect", json={"disconnected": {"year": 2021}})
        again = client.post(f"/api/connections/{connection_id}/disconnect", json={"disconnected": {"year": 2021}})
        fetched = client.get(f"/api/connections/{connection_id}")
        deleted = client.delete(f"/api/connections/{connection_id}")

        assert disconnected.status_code == 200
        assert again.status_code == 409
        assert fetched.json["disconnected_at"] == "2021-01-01"
        assert deleted.status_code == 204
        assert client.get(f"/api/connections/{connection_id}").status_code == 404

    def test_bulk_connect_and_disconnect(self, client: FlaskClient):
        motherboard = create_part(client, "motherboard")
        cpu = create_part(client, "cpu")
        ram_a = create_part(client, "ram")
        ram_b = create_part(client, "ram")

        bulk = client.post(
            "/api/connections/bulk",
            json={
                "part_ids": [cpu["id"], ram_a["id"], ram_b["id"], 999],
                "motherboard_id": motherboard["id"],
                "connected": {"year": 2021},
                "keep_existing_types": ["ram"],
            },
        )
        bulk_disconnect = client.post(
            "/api/connections/bulk-disconnect",
            json={"part_ids": [cpu["id"], ram_a["id"]], "disconnected": {"year": 2022}},
        )

        assert bulk.status_code == 200
        assert bulk.json["success_count"] == 3
        assert bulk.json["failure_count"] == 1
        assert bulk.json["failures"][0]["part_id"] == 999
        assert bulk_disconnect.json["success_count"] == 2
        active = client.get(f"/api/connections/motherboards/{motherboard['id']}?active=true")
        assert [connection["part_id"] for connection in active.json] == [ram_b["id"]]
