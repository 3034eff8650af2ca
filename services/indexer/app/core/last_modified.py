"""Last-modified timestamps per language."""

from datetime import datetime, timezone
from typing import Protocol


class LastModifiedStore(Protocol):
    """Receives a timestamp whenever a mutation succeeds."""

    def set_last_modified_index(
        self, language: str | None, timestamp: datetime | None = None
    ) -> None: ...

    def get_last_modified_index(self, language: str | None) -> datetime | None: ...


class InMemoryLastModifiedStore:
    """Process-local last-modified store."""

    def __init__(self):
        self._timestamps: dict[str, datetime] = {}

    @staticmethod
    def _key(language: str | None) -> str:
        return language or ""

    def set_last_modified_index(
        self, language: str | None, timestamp: datetime | None = None
    ) -> None:
        """Record a modification time; None means now (UTC)."""
        self._timestamps[self._key(language)] = timestamp or datetime.now(timezone.utc)

    def get_last_modified_index(self, language: str | None) -> datetime | None:
        return self._timestamps.get(self._key(language))
