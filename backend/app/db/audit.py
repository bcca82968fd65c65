"""Repository for audit log operations."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.context import RequestContext
from backend.app.db.models import AuditLog
from backend.app.utils.metrics import http_metrics

logger = logging.getLogger(__name__)

# Fields that must never reach an audit entry
REDACTED_FIELDS = frozenset({"password", "password_hash"})


@dataclass
class AuditPage:
    """One page of audit entries plus the unpaged total."""

    total_count: int
    items: list[AuditLog]


def serialize_changes(changes: dict[str, Any] | None) -> str | None:
    """Encode a change set as JSON, dropping credential fields."""
    if not changes:
        return None
    safe = {key: value for key, value in changes.items() if key not in REDACTED_FIELDS}
    return json.dumps(safe, default=str, sort_keys=True)


async def append_audit_log(
    session: AsyncSession,
    ctx: RequestContext,
    entity_name: str,
    entity_id: int | str | None,
    action: str,
    changes: dict[str, Any] | None = None,
    description: str | None = None,
) -> AuditLog:
    """Append an audit entry for an action on a domain entity.

    The entry is added to the session and flushed; committing is left to the
    caller so it lands in the same transaction as the audited change.

    Args:
        session: Database session
        ctx: Request context (actor, client IP)
        entity_name: Audited entity type, e.g. "User"
        entity_id: Audited entity primary key
        action: "Create", "Update" or "Delete"
        changes: Changed fields
        description: Optional human-readable summary

    Returns:
        The pending audit entry
    """
    entry = AuditLog(
        entity_name=entity_name,
        entity_id=str(entity_id) if entity_id is not None else None,
        action=action,
        user_id=ctx.actor,
        description=description,
        changes=serialize_changes(changes),
        ip_address=ctx.ip_address,
    )
    entry.mark_created(ctx.actor)
    session.add(entry)
    await session.flush()

    http_metrics.inc_audit_event(entity_name, action)
    logger.info(
        "Audit: %s %s %s",
        action,
        entity_name,
        entity_id,
        extra={
            "structured": {
                "tenant_id": ctx.tenant_id,
                "entity": entity_name,
                "entity_id": entity_id,
                "action": action,
                "actor": ctx.actor,
            }
        },
    )
    return entry


async def list_audit_logs(
    session: AsyncSession,
    *,
    entity_name: str | None = None,
    entity_id: str | None = None,
    page: int = 1,
    page_size: int = 50,
) -> AuditPage:
    """List the active tenant's audit entries, newest first.

    Args:
        session: Database session
        entity_name: Optional entity type filter
        entity_id: Optional entity id filter
        page: 1-based page number
        page_size: Entries per page

    Returns:
        AuditPage with the total count and the requested slice
    """
    filters = []
    if entity_name:
        filters.append(AuditLog.entity_name == entity_name)
    if entity_id:
        filters.append(AuditLog.entity_id == entity_id)

    count_result = await session.execute(select(func.count(AuditLog.id)).where(*filters))
    total_count = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog)
        .where(*filters)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return AuditPage(total_count=total_count, items=list(result.scalars().all()))
