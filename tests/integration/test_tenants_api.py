"""Integration tests for /api/tenants."""

from collections.abc import Callable

from fastapi.testclient import TestClient

HeadersFor = Callable[..., dict[str, str]]


def test_create_and_list_own_tenant(client: TestClient, headers_for: HeadersFor) -> None:
    response = client.post(
        "/api/tenants",
        json={"name": "Acme", "tenant_id": "acme", "description": "Acme Corp"},
        headers=headers_for("acme"),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["tenant_id"] == "acme"
    assert body["is_active"] is True

    listed = client.get("/api/tenants", headers=headers_for("acme")).json()
    assert [t["tenant_id"] for t in listed] == ["acme"]

    # The tenant record itself is scoped by its own identifier
    assert client.get("/api/tenants", headers=headers_for("other")).json() == []
    assert client.get(f"/api/tenants/{body['id']}", headers=headers_for("other")).status_code == 404


def test_tenant_identifier_unique_across_tenants(
    client: TestClient, headers_for: HeadersFor
) -> None:
    """Test that the identifier check sees tenants the caller cannot read."""
    client.post(
        "/api/tenants", json={"name": "Acme", "tenant_id": "acme"}, headers=headers_for("acme")
    )

    response = client.post(
        "/api/tenants",
        json={"name": "Impostor", "tenant_id": "acme"},
        headers=headers_for("someone-else"),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Tenant identifier already exists"


def test_update_keeps_description_when_blank(client: TestClient, headers_for: HeadersFor) -> None:
    headers = headers_for("acme")
    tenant_id = client.post(
        "/api/tenants",
        json={"name": "Acme", "tenant_id": "acme", "description": "Original"},
        headers=headers,
    ).json()["id"]

    response = client.put(
        f"/api/tenants/{tenant_id}",
        json={"name": "Acme Renamed", "description": "  ", "is_active": False},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Acme Renamed"
    assert body["description"] == "Original"
    assert body["is_active"] is False
    assert body["updated_at"] is not None

    replaced = client.put(
        f"/api/tenants/{tenant_id}",
        json={"name": "Acme", "description": "New", "is_active": True},
        headers=headers,
    )
    assert replaced.json()["description"] == "New"


def test_invalid_tenant_identifier_rejected(client: TestClient, headers_for: HeadersFor) -> None:
    response = client.post(
        "/api/tenants", json={"name": "Bad", "tenant_id": "has space"}, headers=headers_for("a")
    )

    assert response.status_code == 422


def test_delete_tenant(client: TestClient, headers_for: HeadersFor) -> None:
    headers = headers_for("acme")
    tenant_id = client.post(
        "/api/tenants", json={"name": "Acme", "tenant_id": "acme"}, headers=headers
    ).json()["id"]

    assert client.delete(f"/api/tenants/{tenant_id}", headers=headers).status_code == 204
    assert client.get(f"/api/tenants/{tenant_id}", headers=headers).status_code == 404
