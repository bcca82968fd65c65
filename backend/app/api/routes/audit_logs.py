"""Audit log endpoints - append-only, so no update or delete routes."""

import json
import math
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.responses import bad_request, not_found
from backend.app.db.audit import list_audit_logs
from backend.app.db.context import RequestContext
from backend.app.db.engine import get_session
from backend.app.db.models import AuditLog
from backend.app.db.queries import fetch_by_id
from backend.app.models.audit_log import AuditLogCreate, AuditLogPage, AuditLogRead

router = APIRouter(prefix="/api/audit-logs", tags=["audit-logs"])

MAX_PAGE_SIZE = 200


@router.get("", response_model=AuditLogPage)
async def list_entries(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    entity_name: str | None = None,
    entity_id: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = 50,
) -> AuditLogPage:
    """List audit entries, newest first.

    Args:
        entity_name: Only entries for this entity type
        entity_id: Only entries for this entity id
        page: 1-based page number
        page_size: Entries per page (at most 200)

    Returns:
        Page envelope with total_count and total_pages
    """
    result = await list_audit_logs(
        session, entity_name=entity_name, entity_id=entity_id, page=page, page_size=page_size
    )
    return AuditLogPage(
        total_count=result.total_count,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(result.total_count / page_size),
        data=[AuditLogRead.model_validate(entry) for entry in result.items],
    )


@router.get("/{entry_id}", response_model=AuditLogRead)
async def get_entry(
    entry_id: int,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuditLog:
    entry = await fetch_by_id(session, AuditLog, entry_id)
    if entry is None:
        raise not_found()
    return entry


@router.post("", response_model=AuditLogRead, status_code=status.HTTP_201_CREATED)
async def create_entry(
    request: AuditLogCreate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuditLog:
    """Record an audit entry supplied by the caller.

    ``changes`` must be a JSON document when given. The client address
    defaults to the caller's own.
    """
    if request.changes is not None:
        try:
            json.loads(request.changes)
        except json.JSONDecodeError as e:
            raise bad_request("changes must be valid JSON") from e

    entry = AuditLog(
        entity_name=request.entity_name,
        entity_id=request.entity_id,
        action=request.action,
        changes=request.changes,
        user_id=request.user_id or ctx.actor,
        ip_address=request.ip_address or ctx.ip_address,
        description=request.description,
    )
    entry.mark_created(ctx.actor)
    session.add(entry)
    await session.commit()
    return entry
