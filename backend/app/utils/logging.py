"""Logging setup and request logging."""

import json
import logging
import sys
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from backend.app.utils.metrics import http_metrics

logger = logging.getLogger("backend.app.requests")


class StructuredFormatter(logging.Formatter):
    """Appends ``extra={"structured": {...}}`` payloads to the log line as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        structured: dict[str, Any] | None = getattr(record, "structured", None)
        if structured:
            message = f"{message} {json.dumps(structured, default=str, sort_keys=True)}"
        return message


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging; repeated calls replace our handler only."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for existing in list(root.handlers):
        if isinstance(existing.formatter, StructuredFormatter):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        StructuredFormatter("%(asctime)s %(levelname)s %(name)s - %(message)s")
    )
    root.addHandler(handler)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its latency and records HTTP metrics."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000

        route = _route_label(request)
        http_metrics.record_request(request.method, route, response.status_code, latency_ms)
        logger.info(
            "%s %s -> %d (%.0fms)",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            extra={
                "structured": {
                    "tenant_id": getattr(request.state, "tenant_id", None),
                    "route": route,
                    "status": response.status_code,
                    "latency_ms": round(latency_ms, 2),
                }
            },
        )
        return response
