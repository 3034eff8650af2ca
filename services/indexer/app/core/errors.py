"""Doofinder management API error taxonomy."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class DoofinderError(Exception):
    """Base error for every failed management API call."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def get_body(self) -> str:
        """Response body as text, for logging."""
        if self.body is None:
            return ""
        return self.body if isinstance(self.body, str) else str(self.body)


class BadRequest(DoofinderError):
    """Malformed call or missing target (400, 422)."""


class NotAuthenticated(DoofinderError):
    """Credentials rejected by the remote service (401)."""


class NotAllowed(NotAuthenticated):
    """Token valid but not allowed on this search engine (403)."""


class NotFound(DoofinderError):
    """Referenced search engine, index or item is absent (404)."""


class Conflict(DoofinderError):
    """Resource already exists (409)."""


class QuotaExhausted(DoofinderError):
    """Provider rate or quota limit exceeded (429)."""


class ServerError(DoofinderError):
    """Remote service failure (5xx)."""


class InvalidSearchEngine(DoofinderError):
    """Credentials resolved but no usable search engine handle."""


STATUS_ERRORS: dict[int, type[DoofinderError]] = {
    400: BadRequest,
    401: NotAuthenticated,
    403: NotAllowed,
    404: NotFound,
    409: Conflict,
    422: BadRequest,
    429: QuotaExhausted,
}


def error_from_response(
    status_code: int,
    message: str,
    body: Any = None,
) -> DoofinderError:
    """Build the taxonomy error matching an HTTP status code."""
    if status_code in STATUS_ERRORS:
        return STATUS_ERRORS[status_code](message, status_code, body)
    if status_code >= 500:
        return ServerError(message, status_code, body)
    return DoofinderError(message, status_code, body)


class ErrorKind(str, Enum):
    """Outcome variants the indexer branches on."""

    OK = "ok"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    OTHER = "other"


@dataclass
class CallOutcome(Generic[T]):
    """Result of one remote call: either a value or the error it raised."""

    value: T | None = None
    error: Exception | None = None

    @property
    def kind(self) -> ErrorKind:
        if self.error is None:
            return ErrorKind.OK
        if isinstance(self.error, NotFound):
            return ErrorKind.NOT_FOUND
        if isinstance(self.error, BadRequest):
            return ErrorKind.BAD_REQUEST
        return ErrorKind.OTHER

    @property
    def ok(self) -> bool:
        return self.error is None
