"""Tests for the reading ingest endpoint."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from amper_tracker.core.config import settings
from amper_tracker.main import app
from amper_tracker.models.reading import AmperReading
from amper_tracker.services import readings as reading_service


def _count_readings(test_db) -> int:
    return test_db.query(AmperReading).count()


class TestIngestReading:
    """POST /api/data."""

    def test_create_reading(self, client: TestClient, product, test_db) -> None:
        response = client.post(
            "/api/data",
            json={
                "username": "  alice ",
                "amper": "1.5",
                "productId": product.id,
                "sensor": "Motor",
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Amper reading saved successfully"

        data = body["data"]
        assert len(data["id"]) == 24
        assert data["username"] == "alice"
        assert data["amper"] == 1.5
        assert data["product"] == {"id": product.id, "name": "Washing Machine Monitor"}
        assert data["sensor"] == "Motor"
        assert data["timestamp"]

        stored = test_db.get(AmperReading, data["id"])
        assert stored is not None
        assert stored.product_id == product.id

    def test_sensor_is_optional(self, client: TestClient, product) -> None:
        response = client.post(
            "/api/data", json={"username": "alice", "amper": 0.4, "productId": product.id}
        )
        assert response.status_code == 201
        assert response.json()["data"]["sensor"] is None

    @pytest.mark.parametrize("amper", [0, 100])
    def test_inclusive_amper_bounds(self, client: TestClient, product, amper) -> None:
        response = client.post(
            "/api/data", json={"username": "alice", "amper": amper, "productId": product.id}
        )
        assert response.status_code == 201
        assert response.json()["data"]["amper"] == amper

    @pytest.mark.parametrize("amper", [-0.1, 100.5, "lots"])
    def test_invalid_amper(self, client: TestClient, product, test_db, amper) -> None:
        response = client.post(
            "/api/data", json={"username": "alice", "amper": amper, "productId": product.id}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["reason"] == "InvalidAmper"
        assert _count_readings(test_db) == 0

    def test_overflowing_amper(self, client: TestClient, product, test_db) -> None:
        response = client.post(
            "/api/data", json={"username": "alice", "amper": 10**400, "productId": product.id}
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "InvalidAmper"
        assert _count_readings(test_db) == 0

    def test_missing_username(self, client: TestClient, product) -> None:
        response = client.post("/api/data", json={"amper": 1, "productId": product.id})
        assert response.status_code == 400
        assert response.json()["reason"] == "MissingField"
        assert response.json()["message"] == "Username is required"

    def test_username_too_long(self, client: TestClient, product) -> None:
        response = client.post(
            "/api/data", json={"username": "u" * 51, "amper": 1, "productId": product.id}
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "InvalidUsername"

    def test_malformed_product_id(self, client: TestClient) -> None:
        response = client.post(
            "/api/data", json={"username": "alice", "amper": 1, "productId": "not-an-id"}
        )
        assert response.status_code == 400
        assert response.json()["reason"] == "InvalidProductId"

    def test_unknown_product_is_rejected_without_insert(
        self, client: TestClient, product, test_db
    ) -> None:
        response = client.post(
            "/api/data",
            json={"username": "alice", "amper": 1, "productId": "0123456789abcdef01234567"},
        )
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Product not found"}
        assert _count_readings(test_db) == 0

    def test_unknown_sensor_is_rejected(self, client: TestClient, product, test_db) -> None:
        response = client.post(
            "/api/data",
            json={"username": "alice", "amper": 1, "productId": product.id, "sensor": "Pump"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["reason"] == "UnknownSensor"
        assert "Motor, Heater, Circuit A" in body["message"]
        assert _count_readings(test_db) == 0

    def test_non_object_body(self, client: TestClient) -> None:
        response = client.post("/api/data", json=[1, 2, 3])
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_store_failure_returns_500(
        self, client: TestClient, product, test_db, monkeypatch
    ) -> None:
        def failing_commit() -> None:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(test_db, "commit", failing_commit)
        response = client.post(
            "/api/data", json={"username": "alice", "amper": 1, "productId": product.id}
        )
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Internal server error"
        assert "disk I/O error" in body["error"]

    def test_store_failure_hides_detail_in_production(
        self, client: TestClient, product, test_db, monkeypatch
    ) -> None:
        def failing_commit() -> None:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(test_db, "commit", failing_commit)
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = client.post(
            "/api/data", json={"username": "alice", "amper": 1, "productId": product.id}
        )
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}

    def test_unexpected_failure_returns_envelope(
        self, client: TestClient, product, monkeypatch
    ) -> None:
        def broken_create(*args, **kwargs):
            raise RuntimeError("unexpected state")

        monkeypatch.setattr(reading_service, "create_reading", broken_create)
        unguarded = TestClient(app, raise_server_exceptions=False)
        response = unguarded.post(
            "/api/data", json={"username": "alice", "amper": 1, "productId": product.id}
        )
        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Internal server error"
        assert body["error"] == "unexpected state"
