"""Tenant resolution middleware."""

import logging
import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from backend.app.db.context import reset_current_tenant, set_current_tenant
from backend.app.db.tenancy import TENANT_ID_MAX_LENGTH

logger = logging.getLogger(__name__)

TENANT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")


class InvalidTenantError(ValueError):
    """Raised when a supplied tenant identifier is malformed."""


def resolve_tenant_id(header_value: str | None, default_tenant_id: str) -> str:
    """Pick the tenant for a request.

    Args:
        header_value: Raw tenant header, if any
        default_tenant_id: Fallback when the header is missing or blank

    Returns:
        Tenant identifier

    Raises:
        InvalidTenantError: If the header is too long or has illegal characters
    """
    if header_value is None or not header_value.strip():
        return default_tenant_id

    tenant_id = header_value.strip()
    if len(tenant_id) > TENANT_ID_MAX_LENGTH or not TENANT_ID_PATTERN.match(tenant_id):
        raise InvalidTenantError(tenant_id)

    return tenant_id


class TenantMiddleware(BaseHTTPMiddleware):
    """Sets the active tenant for the duration of each request.

    The tenant is reset after the response is produced, also when the
    downstream handler raises.
    """

    def __init__(self, app: ASGIApp, header_name: str, default_tenant_id: str) -> None:
        super().__init__(app)
        self._header_name = header_name
        self._default_tenant_id = default_tenant_id

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            tenant_id = resolve_tenant_id(
                request.headers.get(self._header_name), self._default_tenant_id
            )
        except InvalidTenantError:
            logger.warning("Rejected malformed tenant header on %s", request.url.path)
            return JSONResponse(status_code=400, content={"detail": "Invalid tenant identifier"})

        request.state.tenant_id = tenant_id
        token = set_current_tenant(tenant_id)
        logger.debug("Tenant %s active for %s %s", tenant_id, request.method, request.url.path)
        try:
            return await call_next(request)
        finally:
            reset_current_tenant(token)
