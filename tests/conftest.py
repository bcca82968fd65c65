"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator, Callable, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from backend.app.api.routes.users import get_password_hasher
from backend.app.config import Settings
from backend.app.db.engine import create_async_engine_from_url, create_session_factory, get_session
from backend.app.db.models import Base
from backend.app.main import create_app
from backend.app.security.passwords import PasswordHasher

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


def tenant_headers(tenant_id: str, user: str | None = "tester") -> dict[str, str]:
    """Headers selecting a tenant and (optionally) an actor."""
    headers = {"X-Tenant-Id": tenant_id}
    if user:
        headers["X-User-Id"] = user
    return headers


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """File-backed SQLite database with the schema created.

    A file is used instead of :memory: so every connection sees the same tables.
    """
    path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def test_settings(database_url: str) -> Settings:
    return Settings(
        database_url=database_url,
        redis_url=None,
        environment="development",
        bcrypt_rounds=4,
        rate_limit_per_minute=1000,
    )


@pytest.fixture
def app(test_settings: Settings) -> Iterator[FastAPI]:
    """Application wired to the test database."""
    engine = create_async_engine_from_url(test_settings.database_url, poolclass=NullPool)
    factory = create_session_factory(engine)

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    application = create_app(test_settings)
    application.dependency_overrides[get_session] = override_get_session
    application.dependency_overrides[get_password_hasher] = lambda: PasswordHasher(rounds=4)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine_from_url(database_url, poolclass=NullPool)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Tenant-aware session factory over the test database."""
    return create_session_factory(async_engine)


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires TEST_POSTGRES_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("TEST_POSTGRES_URL")
    if not database_url:
        pytest.skip("TEST_POSTGRES_URL not set - skipping postgres test")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine_from_url(database_url, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def headers_for() -> Callable[..., dict[str, str]]:
    """Factory for tenant/actor request headers."""
    return tenant_headers
