"""Indexer services module."""

from services.indexer.app.services.run import (
    IndexingInProgressError,
    IndexingRunner,
    iter_batches,
)

__all__ = ["IndexingInProgressError", "IndexingRunner", "iter_batches"]
