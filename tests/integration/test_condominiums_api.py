"""Integration tests for /api/condominiums and /api/housing-units."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

HeadersFor = Callable[..., dict[str, str]]

SUNRISE = {
    "name": "Sunrise Towers",
    "address": "1 Main St",
    "city": "Lisbon",
    "postal_code": "1000-001",
    "phone": "+351 210000000",
    "email": "office@sunrise.example",
    "total_units": 2,
}


@pytest.fixture
def headers(headers_for: HeadersFor) -> dict[str, str]:
    return headers_for("tenant-a")


def _create_condominium(client: TestClient, headers: dict[str, str], **overrides: object) -> int:
    response = client.post("/api/condominiums", json={**SUNRISE, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


def _unit(condominium_id: int, unit_number: str = "A-101") -> dict[str, object]:
    return {
        "unit_number": unit_number,
        "unit_type": "Apartment",
        "area_sqm": 82.5,
        "bedrooms": 2,
        "bathrooms": 1,
        "has_garage": True,
        "condominium_id": condominium_id,
    }


class TestCondominiums:
    def test_create_returns_empty_unit_list(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        response = client.post("/api/condominiums", json=SUNRISE, headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Sunrise Towers"
        assert body["is_active"] is True
        assert body["housing_units"] == []

    def test_get_includes_units(self, client: TestClient, headers: dict[str, str]) -> None:
        condo_id = _create_condominium(client, headers)
        client.post("/api/housing-units", json=_unit(condo_id, "A-101"), headers=headers)
        client.post("/api/housing-units", json=_unit(condo_id, "A-102"), headers=headers)

        body = client.get(f"/api/condominiums/{condo_id}", headers=headers).json()
        assert [u["unit_number"] for u in body["housing_units"]] == ["A-101", "A-102"]

        listed = client.get("/api/condominiums", headers=headers).json()
        assert len(listed[0]["housing_units"]) == 2

    def test_update(self, client: TestClient, headers: dict[str, str]) -> None:
        condo_id = _create_condominium(client, headers)

        response = client.put(
            f"/api/condominiums/{condo_id}",
            json={**SUNRISE, "city": "Porto", "is_active": False},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["city"] == "Porto"
        assert response.json()["is_active"] is False

    def test_delete_cascades_units(self, client: TestClient, headers: dict[str, str]) -> None:
        condo_id = _create_condominium(client, headers)
        unit_id = client.post(
            "/api/housing-units", json=_unit(condo_id), headers=headers
        ).json()["id"]

        assert client.delete(f"/api/condominiums/{condo_id}", headers=headers).status_code == 204
        assert client.get(f"/api/condominiums/{condo_id}", headers=headers).status_code == 404
        assert client.get(f"/api/housing-units/{unit_id}", headers=headers).status_code == 404

    def test_negative_units_rejected(self, client: TestClient, headers: dict[str, str]) -> None:
        response = client.post(
            "/api/condominiums", json={**SUNRISE, "total_units": -1}, headers=headers
        )
        assert response.status_code == 422


class TestHousingUnits:
    def test_create_and_get_with_condominium(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        condo_id = _create_condominium(client, headers)

        created = client.post("/api/housing-units", json=_unit(condo_id), headers=headers)
        assert created.status_code == 201
        assert created.json()["area_sqm"] == 82.5
        assert created.json()["is_occupied"] is False

        detail = client.get(f"/api/housing-units/{created.json()['id']}", headers=headers).json()
        assert detail["condominium"] == {"id": condo_id, "name": "Sunrise Towers", "city": "Lisbon"}

    def test_unknown_condominium_rejected(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        response = client.post("/api/housing-units", json=_unit(999), headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Condominium not found"

    def test_area_beyond_column_precision_rejected(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        condo_id = _create_condominium(client, headers)
        payload = {**_unit(condo_id), "area_sqm": 1e8}

        response = client.post("/api/housing-units", json=payload, headers=headers)

        assert response.status_code == 422
        assert client.get("/api/housing-units", headers=headers).json() == []

    def test_foreign_condominium_rejected(
        self, client: TestClient, headers: dict[str, str], headers_for: HeadersFor
    ) -> None:
        condo_id = _create_condominium(client, headers)

        response = client.post(
            "/api/housing-units", json=_unit(condo_id), headers=headers_for("tenant-b")
        )

        assert response.status_code == 400

    def test_filter_by_condominium(self, client: TestClient, headers: dict[str, str]) -> None:
        first = _create_condominium(client, headers)
        second = _create_condominium(client, headers, name="Sunset Court")
        client.post("/api/housing-units", json=_unit(first, "A-1"), headers=headers)
        client.post("/api/housing-units", json=_unit(second, "B-1"), headers=headers)

        everything = client.get("/api/housing-units", headers=headers).json()
        assert [u["unit_number"] for u in everything] == ["A-1", "B-1"]

        filtered = client.get(
            "/api/housing-units", params={"condominium_id": second}, headers=headers
        ).json()
        assert [u["unit_number"] for u in filtered] == ["B-1"]

    def test_duplicate_unit_number_conflicts(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        condo_id = _create_condominium(client, headers)
        client.post("/api/housing-units", json=_unit(condo_id), headers=headers)

        response = client.post("/api/housing-units", json=_unit(condo_id), headers=headers)

        assert response.status_code == 409

    def test_update_revalidates_condominium(
        self, client: TestClient, headers: dict[str, str]
    ) -> None:
        condo_id = _create_condominium(client, headers)
        unit_id = client.post(
            "/api/housing-units", json=_unit(condo_id), headers=headers
        ).json()["id"]

        moved = client.put(
            f"/api/housing-units/{unit_id}",
            json={**_unit(999), "is_occupied": True},
            headers=headers,
        )
        assert moved.status_code == 400

        updated = client.put(
            f"/api/housing-units/{unit_id}",
            json={**_unit(condo_id, "A-201"), "is_occupied": True},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["unit_number"] == "A-201"
        assert updated.json()["is_occupied"] is True

    def test_delete(self, client: TestClient, headers: dict[str, str]) -> None:
        condo_id = _create_condominium(client, headers)
        unit_id = client.post(
            "/api/housing-units", json=_unit(condo_id), headers=headers
        ).json()["id"]

        assert client.delete(f"/api/housing-units/{unit_id}", headers=headers).status_code == 204
        assert client.get(f"/api/housing-units/{unit_id}", headers=headers).status_code == 404
