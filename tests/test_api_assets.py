"""HTTP adapter over the asset service."""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from asset_registry.core.config import AppSettings
from asset_registry.main import create_app


@pytest.fixture()
def client():
    app = create_app(AppSettings(DB_URL="sqlite://", DUPLICATE_STRATEGY="scan"))
    with TestClient(app) as test_client:
        yield test_client


PRINTER_LAPTOP = {
    "serial_number": "SN-77",
    "mac_address": "11:22:33:44:55:66",
    "pc_name": "LT-DANA",
    "employee_number": "E-777",
    "username": "dana",
    "brand": "Dell",
}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["X-Request-ID"]


def test_create_get_and_list(client):
    created = client.post("/api/v1/assets", json=PRINTER_LAPTOP)
    assert created.status_code == 201
    body = created.json()
    assert body["status_log"] == "Created"
    assert body["is_deleted"] is False

    fetched = client.get(f"/api/v1/assets/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["serial_number"] == "SN-77"

    listed = client.get("/api/v1/assets")
    assert [row["id"] for row in listed.json()] == [body["id"]]


def test_update_and_status(client):
    asset_id = client.post("/api/v1/assets", json=PRINTER_LAPTOP).json()["id"]

    updated = client.put(f"/api/v1/assets/{asset_id}", json={"brand": "HP"})
    assert updated.status_code == 200
    assert updated.json()["brand"] == "HP"
    assert updated.json()["username"] == "dana"
    assert updated.json()["status_log"] == "Updated"

    status = client.patch(f"/api/v1/assets/{asset_id}/status", json={"status": "Returned"})
    assert status.status_code == 200
    assert status.json()["buyback_status"] == "Returned"


def test_delete_hides_from_default_list(client):
    asset_id = client.post("/api/v1/assets", json=PRINTER_LAPTOP).json()["id"]

    response = client.delete(f"/api/v1/assets/{asset_id}")
    assert response.status_code == 200
    assert response.json() == {"status": "deleted"}

    assert client.get("/api/v1/assets").json() == []
    everything = client.get("/api/v1/assets/all").json()
    assert [row["id"] for row in everything] == [asset_id]
    assert everything[0]["is_deleted"] is True


def test_missing_asset_returns_error_envelope(client):
    for response in (
        client.get("/api/v1/assets/missing"),
        client.put("/api/v1/assets/missing", json={"brand": "HP"}),
        client.patch("/api/v1/assets/missing/status", json={"status": "Sold"}),
        client.delete("/api/v1/assets/missing"),
    ):
        assert response.status_code == 404
        assert response.json() == {"code": "http_error", "message": "Not found"}


def test_status_update_requires_status(client):
    asset_id = client.post("/api/v1/assets", json=PRINTER_LAPTOP).json()["id"]

    response = client.patch(f"/api/v1/assets/{asset_id}/status", json={})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_check_duplicates_endpoint(client):
    existing = client.post("/api/v1/assets", json=PRINTER_LAPTOP).json()

    candidate = dict(PRINTER_LAPTOP, serial_number="SN-78", pc_name="LT-EVE", username="eve", employee_number="E-778")
    response = client.post("/api/v1/assets/check-duplicates", json=candidate)

    assert response.status_code == 200
    body = response.json()
    assert body["is_duplicate"] is True
    assert body["duplicate_fields"] == ["MAC Address"]
    assert [row["id"] for row in body["existing_assets"]] == [existing["id"]]


def test_check_duplicates_without_matches(client):
    client.post("/api/v1/assets", json=PRINTER_LAPTOP)

    candidate = {
        "serial_number": "X",
        "mac_address": "Y",
        "pc_name": "Z",
        "employee_number": "W",
        "username": "V",
    }
    body = client.post("/api/v1/assets/check-duplicates", json=candidate).json()

    assert body == {"is_duplicate": False, "duplicate_fields": [], "existing_assets": []}


def test_metrics_endpoint_counts_requests(client):
    client.get("/health")
    client.get("/api/v1/assets")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert 'handler="/api/v1/assets"' in response.text


def test_metrics_can_be_disabled():
    app = create_app(AppSettings(DB_URL="sqlite://", METRICS_ENABLED=False))
    with TestClient(app) as test_client:
        assert test_client.get("/metrics").status_code == 404


def test_directly_imported_web_libraries_are_declared():
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")

    for requirement in ('"fastapi', '"starlette', '"prometheus-fastapi-instrumentator', '"prometheus-client'):
        assert requirement in pyproject
