"""Prometheus Metrics — HTTP request counters and latency for /metrics scrapes.

Invariants:
    - Metrics live on the default prometheus_client REGISTRY, defined once per process
    - The route label is the matched route template, never the raw path, so
      payment ids do not create new series
"""

from prometheus_client import Counter, Histogram

http_requests_total = Counter(
    "payments_http_requests_total",
    "Total HTTP requests served",
    ["method", "route", "status"],
)

http_request_duration_seconds = Histogram(
    "payments_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


def observe_request(method: str, route: str, status: int, duration: float) -> None:
    http_requests_total.labels(method=method, route=route, status=str(status)).inc()
    http_request_duration_seconds.labels(method=method, route=route).observe(duration)
