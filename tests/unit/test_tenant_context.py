"""Unit tests for the ambient tenant context."""

import asyncio

import pytest

from backend.app.db.context import (
    clear_current_tenant,
    get_current_tenant,
    reset_current_tenant,
    set_current_tenant,
    tenant_scope,
)


def test_no_tenant_by_default() -> None:
    assert get_current_tenant() is None


def test_set_and_reset_restores_previous() -> None:
    outer = set_current_tenant("outer")
    inner = set_current_tenant("inner")
    assert get_current_tenant() == "inner"

    reset_current_tenant(inner)
    assert get_current_tenant() == "outer"

    reset_current_tenant(outer)
    assert get_current_tenant() is None


def test_tenant_scope_nests() -> None:
    with tenant_scope("a"):
        assert get_current_tenant() == "a"
        with tenant_scope("b"):
            assert get_current_tenant() == "b"
        assert get_current_tenant() == "a"
    assert get_current_tenant() is None


def test_tenant_scope_resets_on_error() -> None:
    with pytest.raises(RuntimeError):
        with tenant_scope("a"):
            raise RuntimeError("boom")

    assert get_current_tenant() is None


def test_clear_current_tenant() -> None:
    token = set_current_tenant("a")
    clear_current_tenant()
    assert get_current_tenant() is None
    reset_current_tenant(token)


@pytest.mark.asyncio
async def test_concurrent_tasks_see_their_own_tenant() -> None:
    """Each task keeps the tenant it set, even when interleaved."""

    async def worker(tenant_id: str) -> list[str | None]:
        seen = []
        with tenant_scope(tenant_id):
            for _ in range(5):
                await asyncio.sleep(0)
                seen.append(get_current_tenant())
        return seen

    results = await asyncio.gather(worker("t1"), worker("t2"), worker("t3"))

    assert results == [["t1"] * 5, ["t2"] * 5, ["t3"] * 5]
    assert get_current_tenant() is None
