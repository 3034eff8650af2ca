"""Translate management API errors into indexer status codes."""

import json
import re
from typing import Any

from services.indexer.app.core.schemas import ApiStatus

# Checked in order; first match wins
RESPONSE_PATTERNS: list[tuple[re.Pattern[str], ApiStatus]] = [
    (
        re.compile(
            r"invalid[ _-]?token|token[ _-]?(expired|invalid)|authentication|"
            r"not[ _-]?authenticated|credentials",
            re.IGNORECASE,
        ),
        ApiStatus.NOT_AUTHENTICATED,
    ),
    (
        re.compile(
            r"search[ _-]?engine[ _-]?not[ _-]?found|invalid[ _-]?hash[ _-]?id|"
            r"unknown[ _-]?search[ _-]?engine",
            re.IGNORECASE,
        ),
        ApiStatus.INVALID_SEARCH_ENGINE,
    ),
    (
        re.compile(
            r"quota|limit[ _-]?exceeded|too[ _-]?many[ _-]?(requests|items)|"
            r"throttled|bad[ _-]?params|invalid[ _-]?params",
            re.IGNORECASE,
        ),
        ApiStatus.BAD_REQUEST,
    ),
]


def _body_text(body: Any) -> str:
    """Flatten an error body into searchable text.

    JSON bodies contribute their error code, message and detail fields.
    """
    if body is None:
        return ""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return body
    if not isinstance(body, dict):
        return str(body)

    parts: list[str] = []
    error = body.get("error")
    if isinstance(error, dict):
        parts.extend(str(error.get(key, "")) for key in ("code", "message"))
    elif error:
        parts.append(str(error))
    for key in ("code", "message", "detail"):
        if body.get(key):
            parts.append(str(body[key]))
    return " ".join(part for part in parts if part)


def response_status(error: Exception) -> ApiStatus | None:
    """Status recognized from the error message or body, if any."""
    text = " ".join(
        part
        for part in (str(error), _body_text(getattr(error, "body", None)))
        if part
    )
    for pattern, status in RESPONSE_PATTERNS:
        if pattern.search(text):
            return status
    return None


def translate_error(error: Exception) -> ApiStatus:
    """Map a caught remote error to an ApiStatus.

    Args:
        error: Exception raised by a management client call

    Returns:
        Status recognized from the message or body, otherwise UNKNOWN_ERROR
    """
    return response_status(error) or ApiStatus.UNKNOWN_ERROR
