"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes all registered Prometheus metrics including:
    - http_requests_total{method, route, status}
    - http_request_latency_ms{method, route}
    - rate_limit_rejections_total
    - audit_events_total{entity, action}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
