"""Caller identity dependency.

Builds the RequestContext from the tenant resolved by TenantMiddleware, the
optional X-User-Id header (the actor recorded on audit entries) and the client
address.
"""

from typing import Annotated

from fastapi import Header, HTTPException, Request, status

from backend.app.db.context import RequestContext, get_current_tenant
from backend.app.ratelimit import client_ip

MAX_ACTOR_LENGTH = 100


async def get_current_context(
    request: Request,
    x_user_id: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context for the current call.

    Args:
        request: Incoming request
        x_user_id: Optional caller identity header

    Returns:
        RequestContext with tenant, actor and client address

    Raises:
        HTTPException: If no tenant is active or the actor header is invalid
    """
    tenant_id = get_current_tenant()
    if not tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No tenant could be resolved for this request",
        )

    actor = x_user_id.strip() if x_user_id and x_user_id.strip() else None
    if actor is not None and len(actor) > MAX_ACTOR_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-User-Id header",
        )

    return RequestContext(tenant_id=tenant_id, actor=actor, ip_address=client_ip(request)[:45])
