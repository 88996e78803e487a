"""Prometheus metrics definitions for Famly."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "famly_http_requests_total",
    "Total number of HTTP requests processed by the Famly API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "famly_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Famly API",
    ["method", "path"],
)

STORE_CALLS = Counter(
    "famly_store_calls_total",
    "Calls made against the remote store by table, operation and result",
    ["backend", "table", "operation", "result"],
)

SAGA_COMPENSATIONS = Counter(
    "famly_saga_compensations_total",
    "Compensating actions executed after a multi-step sequence failed",
    ["sequence", "result"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STORE_CALLS",
    "SAGA_COMPENSATIONS",
]
