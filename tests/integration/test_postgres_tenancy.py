"""PostgreSQL-specific integration test for tenant filtering and cascades.

This test requires a real PostgreSQL instance.

Run with: TEST_POSTGRES_URL='postgresql://...' pytest -m postgres
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine

from backend.app.db.context import tenant_scope
from backend.app.db.engine import create_session_factory
from backend.app.db.models import Condominium, HousingUnit
from backend.app.db.queries import list_all
from backend.app.db.tenancy import INCLUDE_ALL_TENANTS


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_filter_and_cascade_on_postgres(postgres_engine: AsyncEngine) -> None:
    """Test that tenant filtering and ON DELETE CASCADE behave on PostgreSQL."""
    factory = create_session_factory(postgres_engine)

    for tenant_id in ("pg-a", "pg-b"):
        with tenant_scope(tenant_id):
            async with factory() as session:
                condo = Condominium(name=f"Condo {tenant_id}", housing_units=[])
                session.add(condo)
                await session.flush()
                session.add(HousingUnit(unit_number="1", condominium_id=condo.id, area_sqm=55.25))
                await session.commit()

    with tenant_scope("pg-a"):
        async with factory() as session:
            condos = await list_all(session, Condominium)
            assert [c.name for c in condos] == ["Condo pg-a"]

            await session.delete(condos[0])
            await session.commit()

    async with factory() as session:
        result = await session.execute(
            select(func.count(HousingUnit.id)), execution_options={INCLUDE_ALL_TENANTS: True}
        )
        assert result.scalar_one() == 1
