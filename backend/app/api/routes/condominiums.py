"""Condominium endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.api.auth import get_current_context
from backend.app.api.responses import not_found
from backend.app.db.audit import append_audit_log
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import Condominium
from backend.app.db.queries import fetch_by_id, list_all
from backend.app.models.condominium import CondominiumCreate, CondominiumRead, CondominiumUpdate

router = APIRouter(prefix="/api/condominiums", tags=["condominiums"])

_WITH_UNITS = selectinload(Condominium.housing_units)


@router.get("", response_model=list[CondominiumRead])
async def list_condominiums(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[Condominium]:
    """List condominiums with their housing units."""
    return await list_all(session, Condominium, _WITH_UNITS)


@router.get("/{condominium_id}", response_model=CondominiumRead)
async def get_condominium(
    condominium_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Condominium:
    condominium = await fetch_by_id(session, Condominium, condominium_id, _WITH_UNITS)
    if condominium is None:
        raise not_found()
    return condominium


@router.post("", response_model=CondominiumRead, status_code=status.HTTP_201_CREATED)
async def create_condominium(
    request: CondominiumCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Condominium:
    condominium = Condominium(**request.model_dump(), is_active=True, housing_units=[])
    condominium.mark_created(ctx.actor)
    session.add(condominium)
    await session.flush()

    await append_audit_log(
        session, ctx, "Condominium", condominium.id, "Create", changes=request.model_dump()
    )
    await session.commit()
    return condominium


@router.put("/{condominium_id}", response_model=CondominiumRead)
async def update_condominium(
    condominium_id: int,
    request: CondominiumUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Condominium:
    condominium = await fetch_by_id(session, Condominium, condominium_id, _WITH_UNITS)
    if condominium is None:
        raise not_found()

    for field, value in request.model_dump().items():
        setattr(condominium, field, value)
    condominium.mark_updated(ctx.actor)

    await append_audit_log(
        session, ctx, "Condominium", condominium.id, "Update", changes=request.model_dump()
    )
    await session.commit()
    return condominium


@router.delete("/{condominium_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_condominium(
    condominium_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Delete a condominium; its housing units go with it."""
    condominium = await fetch_by_id(session, Condominium, condominium_id)
    if condominium is None:
        raise not_found()

    await session.delete(condominium)
    await append_audit_log(
        session, ctx, "Condominium", condominium_id, "Delete", changes={"name": condominium.name}
    )
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
