"""Shared utilities for Doofinder sync services."""

from shared.utils.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    run_context,
    set_run_id,
)
from shared.utils.metrics import (
    API_CALLS,
    API_CALL_LATENCY,
    create_counter,
    create_histogram,
    track_api_call,
)

__all__ = [
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "run_context",
    "set_run_id",
    "API_CALLS",
    "API_CALL_LATENCY",
    "create_counter",
    "create_histogram",
    "track_api_call",
]
