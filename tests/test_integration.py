import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from zone_engine.api.routes import zones as zones_routes
from zone_engine.errors import CatalogLoadError
from zone_engine.main import create_app
from zone_engine.persistence.filesystem import FileStorage
from zone_engine.services.zones.service import ZoneAssignmentService


@pytest.fixture
def api_client(service, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(zones_routes, "zone_assignment_service", service)
    monkeypatch.setattr(zones_routes, "FileStorage", lambda: FileStorage(root=tmp_path))
    return TestClient(create_app())


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_regions_endpoint(api_client: TestClient):
    response = api_client.get("/api/zones/regions")

    assert response.status_code == 200
    assert response.json()["East"] == ["E1", "E2"]


def test_zone_lookup(api_client: TestClient):
    response = api_client.get("/api/zones/NE1")

    assert response.status_code == 200
    payload = response.json()
    assert payload["type"] == "limited"
    assert payload["region"] == "Northeast"
    assert payload["limitedCities"]["West Bengal"] == ["Siliguri"]


def test_unknown_zone_lookup_is_404(api_client: TestClient):
    assert api_client.get("/api/zones/ZZ9").status_code == 404


def test_validate_endpoint_reports_overlap_and_unknown(api_client: TestClient):
    response = api_client.post("/api/zones/validate", json={"zones": ["NE1", "E1", "ZZ9"]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["isValid"] is False
    assert payload["errors"] == ["unknown zone ZZ9"]
    assert len(payload["warnings"]) == 1


def test_config_endpoint_returns_zone_configs(api_client: TestClient):
    response = api_client.post("/api/zones/config", json={"zones": ["X1", "N1"]})

    assert response.status_code == 200
    payload = response.json()
    assert [zone["zoneCode"] for zone in payload["zones"]] == ["X1", "N1"]
    assert payload["zones"][0]["selectedCities"] == ["Aurangabad||Bihar", "Aurangabad||Maharashtra"]
    assert payload["totalCities"] == 3


def test_config_endpoint_rejects_invalid_selection(api_client: TestClient):
    response = api_client.post("/api/zones/config", json={"zones": ["NE1", "ZZ9"]})

    assert response.status_code == 400
    assert response.json()["detail"] == ["unknown zone ZZ9"]


def test_confirm_endpoint_persists_outputs(api_client: TestClient, tmp_path: Path):
    response = api_client.post(
        "/api/zones/confirm",
        json={"zones": ["N1", "E1", "NE1"], "blank_cell_value": 0, "persist": True},
    )

    assert response.status_code == 200
    payload = response.json()
    assert [zone["zoneCode"] for zone in payload["zones"]] == ["N1", "E1", "NE1"]
    assert sum(len(row) for row in payload["priceMatrix"].values()) == 9
    assert payload["priceMatrix"]["NE1"]["N1"] == 0

    run_dirs = list((tmp_path / "outputs").glob("zones_*"))
    assert len(run_dirs) == 1
    summary = json.loads((run_dirs[0] / "summary.json").read_text(encoding="utf-8"))
    assert summary["priceMatrix"]["E1"]["E1"] == 0
    assert (run_dirs[0] / "zones.csv").read_text(encoding="utf-8").startswith("zone_code,state,city")


def test_confirm_endpoint_rejects_empty_selection(api_client: TestClient, tmp_path: Path):
    response = api_client.post("/api/zones/confirm", json={"zones": []})

    assert response.status_code == 400
    assert not list((tmp_path / "outputs").glob("zones_*"))


def test_catalog_failure_is_service_unavailable(monkeypatch: pytest.MonkeyPatch):
    def loader():
        raise CatalogLoadError("catalog unreachable")

    monkeypatch.setattr(zones_routes, "zone_assignment_service", ZoneAssignmentService(loader=loader))
    client = TestClient(create_app())

    response = client.get("/api/zones/regions")

    assert response.status_code == 503


def test_catalog_health_reports_bundled_catalog(api_client: TestClient):
    response = api_client.get("/api/health/catalog")

    assert response.status_code == 200
    payload = response.json()
    assert payload["healthy"] is True
    assert payload["zones"] == 19
    assert payload["source"].endswith("geography.json")
