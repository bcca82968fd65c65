"""Tenant diagnostics endpoint, only mounted in development."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from backend.app.api.auth import get_current_context
from backend.app.db.context import RequestContext

router = APIRouter(prefix="/api/tenant-info", tags=["tenant-info"])


@router.get("")
async def tenant_info(
    request: Request,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
) -> dict[str, str]:
    """Report the tenant this request runs as and how to switch it."""
    header = request.app.state.settings.tenant_header
    return {
        "tenant_id": ctx.tenant_id,
        "header": header,
        "message": f"Send the {header} header to act as another tenant",
    }
