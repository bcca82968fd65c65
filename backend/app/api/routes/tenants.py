"""Tenant endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.responses import bad_request, not_found
from backend.app.db.audit import append_audit_log
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import Tenant
from backend.app.db.queries import fetch_by_id, list_all, tenant_key_exists
from backend.app.models.tenant import TenantCreate, TenantRead, TenantUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tenants", tags=["tenants"])


@router.get("", response_model=list[TenantRead])
async def list_tenants(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[Tenant]:
    """List tenants visible to the caller (its own record)."""
    return await list_all(session, Tenant)


@router.get("/{tenant_pk}", response_model=TenantRead)
async def get_tenant(
    tenant_pk: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Tenant:
    tenant = await fetch_by_id(session, Tenant, tenant_pk)
    if tenant is None:
        raise not_found()
    return tenant


@router.post("", response_model=TenantRead, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    request: TenantCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Tenant:
    """Register a tenant.

    The tenant identifier must be unique across every tenant, so the check
    bypasses the tenant filter.

    Raises:
        HTTPException: 400 if the identifier is already taken
    """
    if await tenant_key_exists(session, request.tenant_id):
        raise bad_request("Tenant identifier already exists")

    tenant = Tenant(
        name=request.name,
        tenant_id=request.tenant_id,
        description=request.description,
        is_active=True,
    )
    tenant.mark_created(ctx.actor)
    session.add(tenant)
    await session.flush()

    await append_audit_log(
        session,
        ctx,
        "Tenant",
        tenant.id,
        "Create",
        changes=request.model_dump(),
    )
    await session.commit()

    logger.info("Tenant %s created by %s", tenant.tenant_id, ctx.actor)
    return tenant


@router.put("/{tenant_pk}", response_model=TenantRead)
async def update_tenant(
    tenant_pk: int,
    request: TenantUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Tenant:
    """Update a tenant; a blank description keeps the stored one."""
    tenant = await fetch_by_id(session, Tenant, tenant_pk)
    if tenant is None:
        raise not_found()

    tenant.name = request.name
    if request.description and request.description.strip():
        tenant.description = request.description
    tenant.is_active = request.is_active
    tenant.mark_updated(ctx.actor)

    await append_audit_log(
        session, ctx, "Tenant", tenant.id, "Update", changes=request.model_dump()
    )
    await session.commit()
    return tenant


@router.delete("/{tenant_pk}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_pk: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    tenant = await fetch_by_id(session, Tenant, tenant_pk)
    if tenant is None:
        raise not_found()

    await session.delete(tenant)
    await append_audit_log(
        session, ctx, "Tenant", tenant_pk, "Delete", changes={"tenant_id": tenant.tenant_id}
    )
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
