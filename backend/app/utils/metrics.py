"""Prometheus metrics for HTTP traffic and audit activity."""

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

http_request_latency_ms = Histogram(
    "http_request_latency_ms",
    "HTTP request latency in milliseconds",
    ["method", "route"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000],
)

rate_limit_rejections_total = Counter(
    "rate_limit_rejections_total",
    "Requests rejected by the rate limiter",
)

audit_events_total = Counter(
    "audit_events_total",
    "Audit log entries written",
    ["entity", "action"],
)


class PrometheusHttpMetrics:
    """Prometheus-based request metrics implementation."""

    def record_request(self, method: str, route: str, status: int, latency_ms: float) -> None:
        """Record one completed request."""
        http_requests_total.labels(method=method, route=route, status=str(status)).inc()
        http_request_latency_ms.labels(method=method, route=route).observe(latency_ms)

    def inc_rate_limited(self) -> None:
        """Increment rate limiter rejection counter."""
        rate_limit_rejections_total.inc()

    def inc_audit_event(self, entity: str, action: str) -> None:
        """Increment audit entry counter."""
        audit_events_total.labels(entity=entity, action=action).inc()


http_metrics = PrometheusHttpMetrics()
