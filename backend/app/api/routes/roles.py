"""Role endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.responses import not_found
from backend.app.db.audit import append_audit_log
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import Role
from backend.app.db.queries import fetch_by_id, list_all
from backend.app.models.role import RoleCreate, RoleRead, RoleUpdate

router = APIRouter(prefix="/api/roles", tags=["roles"])


@router.get("", response_model=list[RoleRead])
async def list_roles(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[Role]:
    return await list_all(session, Role)


@router.get("/{role_id}", response_model=RoleRead)
async def get_role(
    role_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Role:
    role = await fetch_by_id(session, Role, role_id)
    if role is None:
        raise not_found()
    return role


@router.post("", response_model=RoleRead, status_code=status.HTTP_201_CREATED)
async def create_role(
    request: RoleCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Role:
    """Create a role; duplicate names within a tenant surface as 409."""
    role = Role(name=request.name, description=request.description, is_active=True)
    role.mark_created(ctx.actor)
    session.add(role)
    await session.flush()

    await append_audit_log(session, ctx, "Role", role.id, "Create", changes=request.model_dump())
    await session.commit()
    return role


@router.put("/{role_id}", response_model=RoleRead)
async def update_role(
    role_id: int,
    request: RoleUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Role:
    role = await fetch_by_id(session, Role, role_id)
    if role is None:
        raise not_found()

    role.name = request.name
    role.description = request.description
    role.is_active = request.is_active
    role.mark_updated(ctx.actor)

    await append_audit_log(session, ctx, "Role", role.id, "Update", changes=request.model_dump())
    await session.commit()
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    role = await fetch_by_id(session, Role, role_id)
    if role is None:
        raise not_found()

    await session.delete(role)
    await append_audit_log(session, ctx, "Role", role_id, "Delete", changes={"name": role.name})
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
