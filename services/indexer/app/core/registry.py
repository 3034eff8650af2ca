"""Temporary index bookkeeping for a single indexing run."""


class TemporaryIndexRegistry:
    """Item types whose temporary index was created during this run.

    Owned by the caller of an indexing run and passed into the indexer.
    Entries are cleared by a successful replace so the next run checks
    index existence again.
    """

    def __init__(self, item_types: list[str] | None = None):
        self._created: set[str] = set(item_types or [])

    def has(self, item_type: str) -> bool:
        return item_type in self._created

    def mark(self, item_type: str) -> None:
        self._created.add(item_type)

    def clear(self, item_type: str | None = None) -> None:
        """Forget one item type, or every item type when none is given."""
        if item_type is None:
            self._created.clear()
        else:
            self._created.discard(item_type)

    def marked(self) -> list[str]:
        return sorted(self._created)

    def __len__(self) -> int:
        return len(self._created)

    def __repr__(self) -> str:
        return f"TemporaryIndexRegistry({self.marked()!r})"
