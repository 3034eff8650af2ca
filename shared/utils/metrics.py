"""Prometheus metrics helpers."""

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram


def create_counter(
    name: str,
    description: str,
    labels: list[str] | None = None,
) -> Counter:
    """Create a Prometheus counter metric.

    Args:
        name: Metric name (e.g., 'doofinder_api_calls_total')
        description: Human-readable description
        labels: List of label names for the metric
    """
    return Counter(name, description, labels or [])


def create_histogram(
    name: str,
    description: str,
    labels: list[str] | None = None,
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    """Create a Prometheus histogram metric.

    Args:
        name: Metric name (e.g., 'doofinder_api_call_duration_seconds')
        description: Human-readable description
        labels: List of label names for the metric
        buckets: Custom bucket boundaries (defaults to Prometheus defaults)
    """
    if buckets is None:
        buckets = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
    return Histogram(name, description, labels or [], buckets=buckets)


# Remote management API calls actually issued
API_CALLS = create_counter(
    "doofinder_api_calls_total",
    "Total Doofinder management API calls",
    ["operation", "outcome"],
)

API_CALL_LATENCY = create_histogram(
    "doofinder_api_call_duration_seconds",
    "Doofinder management API call latency in seconds",
    ["operation"],
)


@contextmanager
def track_api_call(operation: str) -> Iterator[None]:
    """Count and time a single remote call.

    The call is counted with outcome "error" when the body raises.
    """
    start_time = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        API_CALLS.labels(operation=operation, outcome=outcome).inc()
        API_CALL_LATENCY.labels(operation=operation).observe(
            time.perf_counter() - start_time
        )
