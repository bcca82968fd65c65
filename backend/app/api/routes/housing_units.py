"""Housing unit endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.api.auth import get_current_context
from backend.app.api.responses import bad_request, not_found
from backend.app.db.audit import append_audit_log
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import Condominium, HousingUnit
from backend.app.db.queries import fetch_by_id
from backend.app.models.condominium import (
    HousingUnitCreate,
    HousingUnitDetail,
    HousingUnitRead,
    HousingUnitUpdate,
)

router = APIRouter(prefix="/api/housing-units", tags=["housing-units"])


async def _require_condominium(session: AsyncSession, condominium_id: int) -> Condominium:
    condominium = await fetch_by_id(session, Condominium, condominium_id)
    if condominium is None:
        raise bad_request("Condominium not found")
    return condominium


@router.get("", response_model=list[HousingUnitRead])
async def list_housing_units(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    condominium_id: Annotated[int | None, Query(gt=0)] = None,
) -> list[HousingUnit]:
    """List housing units, optionally for a single condominium."""
    stmt = select(HousingUnit).order_by(HousingUnit.id)
    if condominium_id is not None:
        stmt = stmt.where(HousingUnit.condominium_id == condominium_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


@router.get("/{unit_id}", response_model=HousingUnitDetail)
async def get_housing_unit(
    unit_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HousingUnit:
    unit = await fetch_by_id(session, HousingUnit, unit_id, selectinload(HousingUnit.condominium))
    if unit is None:
        raise not_found()
    return unit


@router.post("", response_model=HousingUnitRead, status_code=status.HTTP_201_CREATED)
async def create_housing_unit(
    request: HousingUnitCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HousingUnit:
    """Create a housing unit inside one of the caller's condominiums.

    Raises:
        HTTPException: 400 if the condominium does not exist in this tenant
    """
    await _require_condominium(session, request.condominium_id)

    unit = HousingUnit(**request.model_dump(), is_active=True, is_occupied=False)
    unit.mark_created(ctx.actor)
    session.add(unit)
    await session.flush()

    await append_audit_log(
        session, ctx, "HousingUnit", unit.id, "Create", changes=request.model_dump()
    )
    await session.commit()
    return unit


@router.put("/{unit_id}", response_model=HousingUnitRead)
async def update_housing_unit(
    unit_id: int,
    request: HousingUnitUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HousingUnit:
    unit = await fetch_by_id(session, HousingUnit, unit_id)
    if unit is None:
        raise not_found()

    if request.condominium_id != unit.condominium_id:
        await _require_condominium(session, request.condominium_id)

    for field, value in request.model_dump().items():
        setattr(unit, field, value)
    unit.mark_updated(ctx.actor)

    await append_audit_log(
        session, ctx, "HousingUnit", unit.id, "Update", changes=request.model_dump()
    )
    await session.commit()
    return unit


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_housing_unit(
    unit_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    unit = await fetch_by_id(session, HousingUnit, unit_id)
    if unit is None:
        raise not_found()

    changes = {"unit_number": unit.unit_number, "condominium_id": unit.condominium_id}
    await session.delete(unit)
    await append_audit_log(session, ctx, "HousingUnit", unit_id, "Delete", changes=changes)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
