"""Request context for tenancy enforcement.

The current tenant lives in a ContextVar so that each request (or task) sees
only the tenant its own middleware resolved.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass

_current_tenant: ContextVar[str | None] = ContextVar("current_tenant", default=None)


class TenantContextError(RuntimeError):
    """Raised when a tenant-scoped write happens without an active tenant."""


def set_current_tenant(tenant_id: str | None) -> Token[str | None]:
    """Set the active tenant and return a token for resetting it."""
    return _current_tenant.set(tenant_id)


def get_current_tenant() -> str | None:
    """Return the active tenant, or None outside of a tenant scope."""
    return _current_tenant.get()


def reset_current_tenant(token: Token[str | None]) -> None:
    """Restore the tenant that was active before ``set_current_tenant``."""
    _current_tenant.reset(token)


def clear_current_tenant() -> None:
    """Drop the active tenant for the rest of the current context."""
    _current_tenant.set(None)


@contextmanager
def tenant_scope(tenant_id: str) -> Iterator[str]:
    """Run a block with ``tenant_id`` as the active tenant.

    Usage:
        with tenant_scope("demo-tenant"):
            await session.commit()
    """
    token = set_current_tenant(tenant_id)
    try:
        yield tenant_id
    finally:
        reset_current_tenant(token)


@dataclass(frozen=True)
class RequestContext:
    """Request context containing tenant and caller identity.

    Used to stamp audit entries and to attribute writes to an actor.
    """

    tenant_id: str
    actor: str | None = None
    ip_address: str | None = None
