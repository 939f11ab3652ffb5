from __future__ import annotations

from prometheus_client import Counter, Histogram


api_requests_total = Counter(
    "frext_api_requests_total",
    "Total frext-api requests issued by the client",
    labelnames=("endpoint", "method", "outcome"),
)
api_request_duration_seconds = Histogram(
    "frext_api_request_duration_seconds",
    "frext-api request duration in seconds",
    labelnames=("endpoint", "method"),
    buckets=(0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)


def endpoint_label(endpoint: str) -> str:
    # Drop the query string so paginated calls share one series
    return endpoint.split("?", 1)[0] or "/"


def record_request(endpoint: str, method: str, outcome: str, seconds: float) -> None:
    label = endpoint_label(endpoint)
    api_requests_total.labels(endpoint=label, method=method, outcome=outcome).inc()
    api_request_duration_seconds.labels(endpoint=label, method=method).observe(seconds)
