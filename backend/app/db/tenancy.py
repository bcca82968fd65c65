"""Tenant query filter and write stamping for the ORM.

Every ORM statement issued through a ``TenantSession`` is restricted to rows of
the active tenant, and every pending tenant-scoped row without a tenant is
stamped with it at flush time.
"""

import logging
from typing import Any

from sqlalchemy import String, event
from sqlalchemy.orm import (
    Mapped,
    ORMExecuteState,
    Session,
    mapped_column,
    validates,
    with_loader_criteria,
)

from backend.app.db.context import TenantContextError, get_current_tenant

logger = logging.getLogger(__name__)

# Execution option that disables the tenant filter for a single statement.
INCLUDE_ALL_TENANTS = "include_all_tenants"

TENANT_ID_MAX_LENGTH = 50


class DomainValidationError(ValueError):
    """Raised when an entity would enter an invalid state."""


class TenantScopedMixin:
    """Adds the ``tenant_id`` column that the query filter keys on."""

    tenant_id: Mapped[str] = mapped_column(
        String(TENANT_ID_MAX_LENGTH), nullable=False, index=True
    )

    @validates("tenant_id")
    def _validate_tenant_id(self, key: str, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise DomainValidationError("tenant_id must not be empty")
        if len(value) > TENANT_ID_MAX_LENGTH:
            raise DomainValidationError(
                f"tenant_id must not exceed {TENANT_ID_MAX_LENGTH} characters"
            )
        return value


class TenantSession(Session):
    """Session whose reads and writes are bound to the active tenant."""


@event.listens_for(TenantSession, "do_orm_execute")
def _apply_tenant_filter(execute_state: ORMExecuteState) -> None:
    """Append ``tenant_id == <active tenant>`` to ORM statements."""
    if execute_state.is_column_load:
        return
    if not (execute_state.is_select or execute_state.is_update or execute_state.is_delete):
        return
    if execute_state.execution_options.get(INCLUDE_ALL_TENANTS, False):
        return

    # No active tenant compares against "", which matches nothing.
    tenant_id = get_current_tenant() or ""

    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(
            TenantScopedMixin,
            lambda cls: cls.tenant_id == tenant_id,
            include_aliases=True,
        )
    )


@event.listens_for(TenantSession, "before_flush")
def _stamp_tenant(session: Session, flush_context: Any, instances: Any) -> None:
    """Assign the active tenant to new or modified rows that lack one."""
    pending = [
        obj
        for obj in (*session.new, *session.dirty)
        if isinstance(obj, TenantScopedMixin) and not obj.tenant_id
    ]
    if not pending:
        return

    tenant_id = get_current_tenant()
    if not tenant_id:
        raise TenantContextError("No active tenant; cannot persist tenant-scoped rows")

    for obj in pending:
        obj.tenant_id = tenant_id

    logger.debug("Stamped %d row(s) with tenant %s", len(pending), tenant_id)
