"""Core models and utilities for Indexer Service."""

from services.indexer.app.core.errors import (
    BadRequest,
    CallOutcome,
    DoofinderError,
    ErrorKind,
    InvalidSearchEngine,
    NotAllowed,
    NotAuthenticated,
    NotFound,
)
from services.indexer.app.core.last_modified import (
    InMemoryLastModifiedStore,
    LastModifiedStore,
)
from services.indexer.app.core.registry import TemporaryIndexRegistry
from services.indexer.app.core.schemas import (
    ApiStatus,
    IndexBody,
    IndexInfo,
    RunReport,
    SearchEngine,
)
from services.indexer.app.core.status import translate_error

__all__ = [
    "BadRequest",
    "CallOutcome",
    "DoofinderError",
    "ErrorKind",
    "InvalidSearchEngine",
    "NotAllowed",
    "NotAuthenticated",
    "NotFound",
    "InMemoryLastModifiedStore",
    "LastModifiedStore",
    "TemporaryIndexRegistry",
    "ApiStatus",
    "IndexBody",
    "IndexInfo",
    "RunReport",
    "SearchEngine",
    "translate_error",
]
