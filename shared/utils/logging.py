"""Structured logging for the indexer service.

Events are rendered by structlog on top of the standard library. Context
bound with structlog's contextvars (the service name, the id of the active
indexing run) is merged into every event.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

RUN_ID_KEY = "run_id"


def get_run_id() -> str:
    """Get the id of the active indexing run, or "" outside a run."""
    return structlog.contextvars.get_contextvars().get(RUN_ID_KEY, "")


def set_run_id(run_id: str | None = None) -> str:
    """Bind an indexing run id to the logging context.

    A random hex id is generated when none is given.
    """
    rid = run_id or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(**{RUN_ID_KEY: rid})
    return rid


def clear_run_id() -> None:
    structlog.contextvars.unbind_contextvars(RUN_ID_KEY)


@contextmanager
def run_context(run_id: str | None = None) -> Iterator[str]:
    """Bind a run id for the duration of the block and yield it."""
    rid = set_run_id(run_id)
    try:
        yield rid
    finally:
        clear_run_id()


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    json_format: bool = True,
) -> None:
    """Configure structlog and the root logger.

    Args:
        service_name: Bound as "service" on every event
        log_level: Standard library level name
        json_format: JSON lines when True, colored console output otherwise

    Raises:
        ValueError: If log_level is not a known level name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
