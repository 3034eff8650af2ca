"""Full reindex orchestration."""

import asyncio
from typing import Any, Iterator, Mapping, Sequence

from services.indexer.app.core.indexer import DoofinderIndexer
from services.indexer.app.core.registry import TemporaryIndexRegistry
from services.indexer.app.core.schemas import ApiStatus, RunReport
from shared.utils.logging import get_logger, run_context

logger = get_logger(__name__)

# One indexing run per process
_run_lock = asyncio.Lock()


class IndexingInProgressError(Exception):
    """Raised when a run starts while another one is active."""


def iter_batches(
    items: Sequence[dict[str, Any]], batch_size: int
) -> Iterator[list[dict[str, Any]]]:
    """Split items into consecutive batches of at most batch_size."""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    for start in range(0, len(items), batch_size):
        yield list(items[start : start + batch_size])


class IndexingRunner:
    """Drive one full reindex: upload every batch, then swap indices."""

    def __init__(self, indexer: DoofinderIndexer, batch_size: int = 100):
        """Initialize indexing runner.

        Args:
            indexer: Connected indexer for the target search engine
            batch_size: Items per bulk upload
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.indexer = indexer
        self.batch_size = batch_size

    async def run(
        self,
        items_by_type: Mapping[str, Sequence[dict[str, Any]]],
        run_id: str | None = None,
    ) -> RunReport:
        """Reindex every item type.

        Indices are replaced only after all batches of all item types were
        uploaded. The first failed batch aborts the run.

        Args:
            items_by_type: Serialized items keyed by item type
            run_id: Run identifier for logs (generated when omitted)

        Returns:
            Report of the run

        Raises:
            IndexingInProgressError: If another run is active
        """
        if _run_lock.locked():
            raise IndexingInProgressError("An indexing run is already in progress")

        async with _run_lock:
            with run_context(run_id) as rid:
                return await self._run(items_by_type, RunReport(run_id=rid))

    async def _run(
        self,
        items_by_type: Mapping[str, Sequence[dict[str, Any]]],
        report: RunReport,
    ) -> RunReport:
        registry = TemporaryIndexRegistry()
        uploaded: list[str] = []

        logger.info("indexing_run_started", item_types=list(items_by_type))

        for item_type, items in items_by_type.items():
            if not items:
                logger.info("item_type_skipped", item_type=item_type, reason="no_items")
                continue

            report.batches_sent[item_type] = 0
            report.items_sent[item_type] = 0

            for batch in iter_batches(items, self.batch_size):
                status = await self.indexer.send_batch(item_type, batch, registry)
                if status != ApiStatus.SUCCESS:
                    report.status = status
                    report.failed_type = item_type
                    logger.error(
                        "indexing_run_aborted",
                        item_type=item_type,
                        status=status.value,
                        batches_sent=report.batches_sent[item_type],
                    )
                    return report

                report.batches_sent[item_type] += 1
                report.items_sent[item_type] += len(batch)

            uploaded.append(item_type)

        for item_type in uploaded:
            status = await self.indexer.replace_index(item_type, registry)
            if status != ApiStatus.SUCCESS:
                report.status = status
                report.failed_type = item_type
                logger.error(
                    "indexing_run_replace_failed",
                    item_type=item_type,
                    status=status.value,
                    replaced=report.replaced,
                )
                return report
            report.replaced.append(item_type)

        logger.info(
            "indexing_run_completed",
            replaced=report.replaced,
            items_sent=report.items_sent,
            api_calls=self.indexer.api_calls,
        )
        return report
