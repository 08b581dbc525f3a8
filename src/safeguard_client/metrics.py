"""Prometheus instrumentation for API calls and poll loops.

Metrics live in a dedicated registry rather than the global one, so
embedding applications decide whether and where to expose them::

    prometheus_client.generate_latest(metrics.REGISTRY)
"""

from prometheus_client import CollectorRegistry, Counter, Histogram

REGISTRY = CollectorRegistry()

API_REQUESTS = Counter(
    "safeguard_api_requests",
    "Requests sent to the Safeguard API",
    labelnames=("method", "status"),
    registry=REGISTRY,
)

API_REQUEST_DURATION = Histogram(
    "safeguard_api_request_duration_seconds",
    "Duration of requests sent to the Safeguard API",
    labelnames=("method",),
    registry=REGISTRY,
)

POLL_OUTCOMES = Counter(
    "safeguard_poll_outcomes",
    "Results of checkout and task poll loops",
    labelnames=("loop", "outcome"),
    registry=REGISTRY,
)


def record_request(method: str, status: int | str, duration: float) -> None:
    API_REQUESTS.labels(method=method, status=str(status)).inc()
    API_REQUEST_DURATION.labels(method=method).observe(duration)


def record_poll_outcome(loop: str, outcome: str) -> None:
    POLL_OUTCOMES.labels(loop=loop, outcome=outcome).inc()
