"""Health check endpoints.

- /health: liveness, always 200
- /healthz: checks DB and (when configured) Redis connectivity
"""

import logging
from typing import Annotated, Any

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.engine import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


async def check_db(session: AsyncSession) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        # Raw connection: a liveness probe is not tenant-scoped
        connection = await session.connection()
        await connection.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return (False, f"error: {type(e).__name__}")


async def check_redis(redis_url: str | None) -> tuple[bool, str]:
    """Check Redis connectivity.

    Returns:
        (is_ok, status_message)
    """
    if not redis_url:
        return (True, "not_configured")

    client = aioredis.from_url(redis_url, decode_responses=True)
    try:
        await client.ping()
        return (True, "ok")
    except Exception as e:
        logger.warning("Redis health check failed: %s", e)
        return (False, f"error: {type(e).__name__}")
    finally:
        await client.aclose()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> dict[str, Any] | JSONResponse:
    """Readiness check.

    Returns:
        200 with component status if core systems ok
        503 if a component fails
    """
    db_ok, db_status = await check_db(session)
    redis_ok, redis_status = await check_redis(request.app.state.settings.redis_url)

    core_ok = db_ok and redis_ok
    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {"db": db_status, "redis": redis_status},
    }

    if not core_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
