"""Tenancy-safe query helpers.

Lookups by id always go through a SELECT so the tenant filter applies; the
identity map is never consulted directly.
"""

from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import Base, Tenant
from backend.app.db.tenancy import INCLUDE_ALL_TENANTS

ModelT = TypeVar("ModelT", bound=Base)


async def fetch_by_id(
    session: AsyncSession, model: type[ModelT], entity_id: int, *options: Any
) -> ModelT | None:
    """Fetch a row of the active tenant by primary key.

    Args:
        session: Database session
        model: Mapped class
        entity_id: Primary key
        options: Loader options (e.g. selectinload)

    Returns:
        The row, or None when missing or owned by another tenant
    """
    stmt = select(model).where(model.id == entity_id)  # type: ignore[attr-defined]
    if options:
        stmt = stmt.options(*options)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_all(session: AsyncSession, model: type[ModelT], *options: Any) -> list[ModelT]:
    """List the active tenant's rows ordered by id."""
    stmt = select(model).order_by(model.id)  # type: ignore[attr-defined]
    if options:
        stmt = stmt.options(*options)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def tenant_key_exists(session: AsyncSession, tenant_id: str) -> bool:
    """Check a tenant identifier against every tenant, not just the active one."""
    result = await session.execute(
        select(func.count(Tenant.id)).where(Tenant.tenant_id == tenant_id.strip()),
        execution_options={INCLUDE_ALL_TENANTS: True},
    )
    return result.scalar_one() > 0
