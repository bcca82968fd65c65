"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI

from backend.app.api.routes.audit_logs import router as audit_logs_router
from backend.app.api.routes.condominiums import router as condominiums_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.housing_units import router as housing_units_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.roles import router as roles_router
from backend.app.api.routes.tenant_info import router as tenant_info_router
from backend.app.api.routes.tenants import router as tenants_router
from backend.app.api.routes.user_roles import router as user_roles_router
from backend.app.api.routes.users import router as users_router
from backend.app.config import Settings, get_settings
from backend.app.middleware.errors import ErrorHandlingMiddleware, register_exception_handlers
from backend.app.middleware.ratelimit import RateLimitMiddleware
from backend.app.middleware.security_headers import (
    BodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from backend.app.middleware.tenant import TenantMiddleware
from backend.app.ratelimit import InMemoryRateLimiter, RateLimiter, RedisRateLimiter
from backend.app.utils.logging import RequestLoggingMiddleware, configure_logging

logger = logging.getLogger(__name__)

API_TITLE = "Condominium Administration API"
API_VERSION = "1.0.0"

RESOURCE_ENDPOINTS = {
    "tenants": "/api/tenants",
    "users": "/api/users",
    "roles": "/api/roles",
    "user_roles": "/api/user-roles",
    "condominiums": "/api/condominiums",
    "housing_units": "/api/housing-units",
    "audit_logs": "/api/audit-logs",
}


def build_rate_limiter(settings: Settings) -> RateLimiter:
    """Redis-backed limiter when REDIS_URL is set, in-process otherwise."""
    if settings.redis_url:
        client = aioredis.from_url(settings.redis_url, decode_responses=True)
        return RedisRateLimiter(
            client, settings.rate_limit_per_minute, settings.rate_limit_window_seconds
        )
    return InMemoryRateLimiter(
        settings.rate_limit_per_minute,
        settings.rate_limit_window_seconds,
        settings.rate_limit_max_tracked_keys,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the rate limiter backend on shutdown."""
    yield
    await app.state.rate_limiter.aclose()
    logger.info("Rate limiter closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Middleware runs outermost first: security headers, error masking, request
    logging, rate limiting, body size limit, tenant resolution.

    Args:
        settings: Settings to use (defaults to the environment)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.rate_limiter = build_rate_limiter(settings)

    # Registered innermost first
    app.add_middleware(
        TenantMiddleware,
        header_name=settings.tenant_header,
        default_tenant_id=settings.default_tenant_id,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_request_body_bytes)
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorHandlingMiddleware, expose_details=settings.is_development)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(tenants_router)
    app.include_router(users_router)
    app.include_router(roles_router)
    app.include_router(user_roles_router)
    app.include_router(condominiums_router)
    app.include_router(housing_units_router)
    app.include_router(audit_logs_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": API_TITLE, "status": "running"}

    if settings.is_development:
        app.include_router(tenant_info_router)

        @app.get("/info")
        async def info() -> dict[str, object]:
            """List resource endpoints (development only)."""
            return {
                "message": API_TITLE,
                "version": API_VERSION,
                "environment": settings.environment,
                "endpoints": RESOURCE_ENDPOINTS,
            }

    logger.info("Application configured for %s", settings.environment)
    return app


app = create_app()
