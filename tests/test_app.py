from datetime import date
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.document_store import EnergyDocumentCollection
from services.generator import generate_energy_data


class NoJitter:
    def uniform(self, a: float, b: float) -> float:
        return 0.0


@pytest.fixture
def collection(tmp_path) -> EnergyDocumentCollection:
    store = EnergyDocumentCollection(name="test", persistence_path=tmp_path / "energy.json")
    store.connect()
    store.bulk_insert(generate_energy_data(today=date(2026, 3, 1), rng=NoJitter()))
    return store


@pytest.fixture
def api_client(collection, monkeypatch) -> Iterator[TestClient]:
    monkeypatch.setattr("app.api.build_default_collection", lambda: collection)

    app = create_app()
    with TestClient(app) as client:
        yield client


def test_health(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_readings_returns_all_documents(api_client: TestClient) -> None:
    response = api_client.get("/energy")

    assert response.status_code == 200
    payload = response.json()
    assert len(payload) == (12 + 3) * 20
    assert set(payload[0].keys()) == {"year", "month", "floor", "category", "reading", "isExceeded"}
    assert payload[0]["year"] == 2025
    assert payload[0]["month"] == "January"


def test_list_readings_filters(api_client: TestClient) -> None:
    response = api_client.get(
        "/energy", params={"category": "HVAC", "month": "July", "floor": 3}
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload == [
        {
            "year": 2025,
            "month": "July",
            "floor": 3,
            "category": "HVAC",
            "reading": 3430,
            "isExceeded": False,
        }
    ]


def test_list_readings_exceeded_filter(api_client: TestClient) -> None:
    response = api_client.get("/energy", params={"exceeded": "true", "year": 2025})

    assert response.status_code == 200
    payload = response.json()
    assert payload
    assert all(item["isExceeded"] and item["reading"] > 3500 for item in payload)
    assert {item["category"] for item in payload} == {"HVAC"}


@pytest.mark.parametrize(
    "params",
    [{"month": "Smarch"}, {"category": "Elevators"}],
)
def test_list_readings_rejects_unknown_values(api_client: TestClient, params) -> None:
    response = api_client.get("/energy", params=params)

    assert response.status_code == 400
    assert "Unknown" in response.json()["detail"]


def test_list_readings_validates_floor_range(api_client: TestClient) -> None:
    response = api_client.get("/energy", params={"floor": 9})

    assert response.status_code == 422


def test_summary_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/energy/summary")

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_count"] == 300
    other = next(item for item in payload["categories"] if item["category"] == "Other")
    assert other["count"] == 75
    assert other["average_reading"] == 650
    assert other["min_reading"] == 550
    assert other["max_reading"] == 750


def test_summary_endpoint_filters_by_year(api_client: TestClient) -> None:
    response = api_client.get("/energy/summary", params={"year": 2026})

    assert response.status_code == 200
    assert response.json()["total_count"] == 3 * 20


def test_unreachable_store_returns_service_unavailable(tmp_path, monkeypatch) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file")
    broken = EnergyDocumentCollection(name="broken", persistence_path=blocker / "energy.json")
    monkeypatch.setattr("app.api.build_default_collection", lambda: broken)

    with TestClient(create_app()) as client:
        response = client.get("/energy")

    assert response.status_code == 503
    assert "Cannot open collection" in response.json()["detail"]


def test_undecodable_store_file_serves_empty_collection(tmp_path, monkeypatch) -> None:
    path = tmp_path / "energy.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    store = EnergyDocumentCollection(name="garbled", persistence_path=path)
    monkeypatch.setattr("app.api.build_default_collection", lambda: store)

    with TestClient(create_app()) as client:
        listing = client.get("/energy")
        summary = client.get("/energy/summary")

    assert listing.status_code == 200
    assert listing.json() == []
    assert summary.json()["total_count"] == 0
