"""Integration tests for /api/users."""

import asyncio
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.pool import NullPool

from backend.app.db.context import tenant_scope
from backend.app.db.engine import create_async_engine_from_url, create_session_factory
from backend.app.db.models import User
from backend.app.security.passwords import PasswordHasher

HeadersFor = Callable[..., dict[str, str]]

ALICE = {
    "username": "alice",
    "email": "Alice@Example.com",
    "password": "secret1",
    "first_name": "Alice",
    "last_name": "Liddell",
}


@pytest.fixture
def headers(headers_for: HeadersFor) -> dict[str, str]:
    return headers_for("tenant-a")


def test_create_user_hides_password(client: TestClient, headers: dict[str, str]) -> None:
    response = client.post("/api/users", json=ALICE, headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "alice"
    assert body["email"] == "alice@example.com"
    assert body["is_active"] is True
    assert "password" not in body
    assert "password_hash" not in body


def test_list_and_get_users(client: TestClient, headers: dict[str, str]) -> None:
    user_id = client.post("/api/users", json=ALICE, headers=headers).json()["id"]

    listed = client.get("/api/users", headers=headers).json()
    assert [u["id"] for u in listed] == [user_id]
    assert all("password_hash" not in u for u in listed)

    fetched = client.get(f"/api/users/{user_id}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["first_name"] == "Alice"


def test_get_missing_user_404(client: TestClient, headers: dict[str, str]) -> None:
    response = client.get("/api/users/999", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"detail": "Resource not found"}


@pytest.mark.parametrize(
    "changes",
    [
        {"username": "alice", "email": "other@example.com"},
        {"username": "bob", "email": "alice@example.com"},
    ],
)
def test_duplicate_username_or_email_rejected(
    client: TestClient, headers: dict[str, str], changes: dict[str, str]
) -> None:
    client.post("/api/users", json=ALICE, headers=headers)

    response = client.post("/api/users", json={**ALICE, **changes}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Username or email already exists"


def test_same_username_in_other_tenant_allowed(
    client: TestClient, headers: dict[str, str], headers_for: HeadersFor
) -> None:
    client.post("/api/users", json=ALICE, headers=headers)

    response = client.post("/api/users", json=ALICE, headers=headers_for("tenant-b"))

    assert response.status_code == 201


def test_invalid_email_rejected(client: TestClient, headers: dict[str, str]) -> None:
    response = client.post("/api/users", json={**ALICE, "email": "not-an-email"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email"


@pytest.mark.parametrize("username", ["x'; DROP TABLE users", "<script>alert(1)</script>"])
def test_injection_patterns_rejected(
    client: TestClient,
    headers: dict[str, str],
    username: str,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level("WARNING"):
        response = client.post(
            "/api/users", json={**ALICE, "username": username}, headers=headers
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid data"
    assert any("suspicious" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    "payload",
    [
        {**ALICE, "username": "ab"},
        {**ALICE, "password": "12345"},
        {key: value for key, value in ALICE.items() if key != "password"},
    ],
)
def test_schema_validation(client: TestClient, headers: dict[str, str], payload: dict) -> None:
    assert client.post("/api/users", json=payload, headers=headers).status_code == 422


def test_update_user(client: TestClient, headers: dict[str, str]) -> None:
    user_id = client.post("/api/users", json=ALICE, headers=headers).json()["id"]

    response = client.put(
        f"/api/users/{user_id}",
        json={
            "username": "alice2",
            "email": "alice2@example.com",
            "first_name": "Al",
            "is_active": False,
        },
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "alice2"
    assert body["first_name"] == "Al"
    assert body["last_name"] is None
    assert body["is_active"] is False
    assert body["updated_at"] is not None


def test_update_to_taken_username_rejected(client: TestClient, headers: dict[str, str]) -> None:
    client.post("/api/users", json=ALICE, headers=headers)
    bob_id = client.post(
        "/api/users",
        json={"username": "bob", "email": "bob@example.com", "password": "secret1"},
        headers=headers,
    ).json()["id"]

    response = client.put(
        f"/api/users/{bob_id}",
        json={"username": "alice", "email": "bob@example.com"},
        headers=headers,
    )

    assert response.status_code == 400


def test_delete_user(client: TestClient, headers: dict[str, str]) -> None:
    user_id = client.post("/api/users", json=ALICE, headers=headers).json()["id"]

    assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 204
    assert client.get(f"/api/users/{user_id}", headers=headers).status_code == 404
    assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 404


def test_password_is_stored_hashed(
    client: TestClient, headers: dict[str, str], database_url: str
) -> None:
    """Test that the stored hash verifies against the submitted password."""
    client.post("/api/users", json=ALICE, headers=headers)

    async def load_hash() -> str:
        engine = create_async_engine_from_url(database_url, poolclass=NullPool)
        try:
            with tenant_scope("tenant-a"):
                async with create_session_factory(engine)() as session:
                    result = await session.execute(select(User.password_hash))
                    return result.scalar_one()
        finally:
            await engine.dispose()

    stored = asyncio.run(load_hash())

    assert stored != ALICE["password"]
    assert PasswordHasher(rounds=4).verify_password(ALICE["password"], stored)
