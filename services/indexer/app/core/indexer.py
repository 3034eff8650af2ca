"""Batch indexing against the Doofinder management API."""

from datetime import datetime
from typing import Any

from services.indexer.app.clients import build_client
from services.indexer.app.clients.base import BaseManagementClient
from services.indexer.app.config import Settings
from services.indexer.app.core.errors import (
    CallOutcome,
    DoofinderError,
    ErrorKind,
    InvalidSearchEngine,
    NotAuthenticated,
    NotFound,
)
from services.indexer.app.core.last_modified import (
    InMemoryLastModifiedStore,
    LastModifiedStore,
)
from services.indexer.app.core.registry import TemporaryIndexRegistry
from services.indexer.app.core.schemas import ApiStatus, IndexBody, SearchEngine
from services.indexer.app.core.status import translate_error
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class DoofinderIndexer:
    """Index items of one search engine (one language).

    Every operation returns an ApiStatus; remote errors are logged and
    translated, never raised.

    Indexing run flow:
      send_batch (per batch, per item type) -> replace_index (per item type)
    """

    def __init__(
        self,
        client: BaseManagementClient | None,
        language: str | None = None,
        last_modified: LastModifiedStore | None = None,
        api_disabled: bool = False,
        index_preset: str = "generic",
    ):
        """Initialize indexer.

        Args:
            client: Management client, None when credentials are incomplete
            language: Language context of the search engine
            last_modified: Receives a timestamp after each successful mutation
            api_disabled: Skip remote calls, report success
            index_preset: Preset used when creating indices
        """
        self.client = client
        self.language = language
        self.last_modified = last_modified or InMemoryLastModifiedStore()
        self.api_disabled = api_disabled
        self.index_preset = index_preset

        self.search_engine: SearchEngine | None = None
        self.search_engine_api_status = ApiStatus.INVALID_SEARCH_ENGINE
        self.api_calls = 0

        if api_disabled:
            logger.warning("management_api_disabled", language=language)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        language: str | None = None,
        last_modified: LastModifiedStore | None = None,
    ) -> "DoofinderIndexer":
        """Build an indexer with a throttled client from settings."""
        return cls(
            client=build_client(settings, language),
            language=language,
            last_modified=last_modified,
            api_disabled=settings.api_disabled,
            index_preset=settings.index_preset,
        )

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()

    # ================================================================
    # Remote calls
    # ================================================================

    async def _call(self, operation: str, *args: Any) -> CallOutcome:
        """Issue one remote call and capture its outcome."""
        if self.api_disabled:
            logger.debug("management_api_call_skipped", operation=operation)
            return CallOutcome()

        try:
            value = await getattr(self.client, operation)(*args)
        except Exception as e:
            self.api_calls += 1
            logger.warning(
                "management_api_call_failed",
                operation=operation,
                error_type=type(e).__name__,
                error=str(e),
                status_code=getattr(e, "status_code", None),
                body=e.get_body() if isinstance(e, DoofinderError) else None,
            )
            return CallOutcome(error=e)

        self.api_calls += 1
        return CallOutcome(value=value)

    def _touch(self, update_time: datetime | None = None) -> None:
        self.last_modified.set_last_modified_index(self.language, update_time)

    def _index_body(self, item_type: str) -> IndexBody:
        return IndexBody(name=item_type, preset=self.index_preset)

    # ================================================================
    # Search engine
    # ================================================================

    async def connect(self) -> ApiStatus:
        """Resolve the search engine handle and record its status."""
        if self.client is None:
            logger.error("search_engine_unavailable", reason="missing_credentials")
            self.search_engine = None
            self.search_engine_api_status = ApiStatus.UNKNOWN_ERROR
            return self.search_engine_api_status

        if self.api_disabled:
            self.search_engine = SearchEngine(hashid="disabled", language=self.language)
            self.search_engine_api_status = ApiStatus.SUCCESS
            return self.search_engine_api_status

        outcome = await self._call("get_search_engine")

        if outcome.ok and outcome.value:
            self.search_engine = outcome.value
            self.search_engine_api_status = ApiStatus.SUCCESS
        elif outcome.ok:
            # Most likely a wrong hash
            self.search_engine = None
            self.search_engine_api_status = ApiStatus.INVALID_SEARCH_ENGINE
        elif isinstance(outcome.error, (NotFound, InvalidSearchEngine)):
            self.search_engine = None
            self.search_engine_api_status = ApiStatus.INVALID_SEARCH_ENGINE
        elif isinstance(outcome.error, NotAuthenticated):
            self.search_engine = None
            self.search_engine_api_status = ApiStatus.NOT_AUTHENTICATED
        else:
            self.search_engine = None
            self.search_engine_api_status = ApiStatus.UNKNOWN_ERROR

        logger.info(
            "search_engine_resolved",
            language=self.language,
            status=self.search_engine_api_status.value,
            hashid=self.search_engine.hashid if self.search_engine else None,
        )
        return self.search_engine_api_status

    # ================================================================
    # Batch indexing
    # ================================================================

    async def send_batch(
        self,
        item_type: str,
        items: list[dict[str, Any]],
        registry: TemporaryIndexRegistry,
    ) -> ApiStatus:
        """Upload a batch of items into the temporary index of item_type.

        The temporary index is created on the first batch of the run. When
        the production index is missing it is created first.

        Args:
            item_type: Index name
            items: Serialized items
            registry: Temporary indices created during this run

        Returns:
            SUCCESS, or the status of the failure
        """
        if self.search_engine is None:
            logger.warning(
                "send_batch_invalid_search_engine",
                item_type=item_type,
                status=self.search_engine_api_status.value,
            )
            return self.search_engine_api_status

        if not registry.has(item_type):
            status = await self._ensure_temporary_index(item_type, registry)
            if status is not None:
                return status

        outcome = await self._call("create_temp_bulk", item_type, items)
        if not outcome.ok:
            status = translate_error(outcome.error)
            logger.error(
                "batch_failed",
                item_type=item_type,
                items=len(items),
                status=status.value,
            )
            return status

        logger.info(
            "batch_sent",
            item_type=item_type,
            items=len(items),
            api_calls=self.api_calls,
        )
        return ApiStatus.SUCCESS

    async def _ensure_temporary_index(
        self,
        item_type: str,
        registry: TemporaryIndexRegistry,
    ) -> ApiStatus | None:
        """Create the temporary index, and the real one if it is missing.

        Returns:
            None to continue with the upload, or a fatal status
        """
        outcome = await self._call("create_temporary_index", item_type)

        if outcome.kind == ErrorKind.OK:
            registry.mark(item_type)
            logger.info("temp_index_created", item_type=item_type)
            return None

        if outcome.kind != ErrorKind.NOT_FOUND:
            logger.info("temp_index_probably_exists", item_type=item_type)
            return None

        logger.info("real_index_not_found", item_type=item_type)

        created = await self._call("create_index", self._index_body(item_type))
        if not created.ok:
            logger.error("real_index_not_created", item_type=item_type)
            return ApiStatus.UNKNOWN_ERROR
        logger.info("real_index_created", item_type=item_type, preset=self.index_preset)

        retried = await self._call("create_temporary_index", item_type)
        if not retried.ok:
            logger.error("temp_index_not_created", item_type=item_type)
            return ApiStatus.UNKNOWN_ERROR

        registry.mark(item_type)
        logger.info("temp_index_created", item_type=item_type)
        return None

    async def replace_index(
        self,
        index_name: str,
        registry: TemporaryIndexRegistry,
    ) -> ApiStatus:
        """Swap the temporary index into production.

        Commit point of an indexing run: only call it after every batch of
        the run succeeded.
        """
        registry.clear()

        if self.search_engine is None:
            logger.warning(
                "replace_index_invalid_search_engine",
                index_name=index_name,
                status=self.search_engine_api_status.value,
            )
            return self.search_engine_api_status

        outcome = await self._call("replace_index", index_name)
        if not outcome.ok:
            logger.error("replace_index_failed", index_name=index_name)
            return ApiStatus.UNKNOWN_ERROR

        self._touch()
        logger.info(
            "index_replaced",
            index_name=index_name,
            api_calls=self.api_calls,
        )
        return ApiStatus.SUCCESS

    # ================================================================
    # Single item updates
    # ================================================================

    async def update_item(
        self,
        item_type: str,
        item_id: str | int,
        data: dict[str, Any],
        update_time: datetime | None = None,
    ) -> ApiStatus:
        """Update an item in place, creating it when it does not exist yet."""
        if self.search_engine is None:
            logger.warning("update_item_invalid_search_engine", item_type=item_type)
            return self.search_engine_api_status

        outcome = await self._call("update_item", item_type, str(item_id), data)

        if outcome.kind == ErrorKind.OK:
            self._touch(update_time)
            logger.info("item_updated", item_type=item_type, item_id=str(item_id))
            return ApiStatus.SUCCESS

        if outcome.kind != ErrorKind.BAD_REQUEST:
            return ApiStatus.UNKNOWN_ERROR

        # The item, or its index, is probably missing
        await self.maybe_create_type(item_type)

        created = await self._call(
            "create_item", item_type, {"id": str(item_id), **data}
        )
        if not created.ok:
            logger.error("item_not_created", item_type=item_type, item_id=str(item_id))
            return ApiStatus.BAD_REQUEST

        self._touch(update_time)
        logger.info("item_created", item_type=item_type, item_id=str(item_id))
        return ApiStatus.SUCCESS

    async def remove_item(
        self,
        item_type: str,
        item_id: str | int,
        update_time: datetime | None = None,
    ) -> ApiStatus:
        """Delete an item from the production index."""
        if self.search_engine is None:
            logger.warning("remove_item_invalid_search_engine", item_type=item_type)
            return self.search_engine_api_status

        outcome = await self._call("delete_item", item_type, str(item_id))
        if not outcome.ok:
            return ApiStatus.UNKNOWN_ERROR

        self._touch(update_time)
        logger.info("item_removed", item_type=item_type, item_id=str(item_id))
        return ApiStatus.SUCCESS

    async def maybe_create_type(self, item_type: str) -> None:
        """Create the index for item_type unless it is already listed.

        Failures are logged only; a failed listing counts as "not listed".
        """
        if self.api_disabled:
            logger.debug("maybe_create_type_skipped", item_type=item_type)
            return

        listed = await self._call("list_indices")
        names = [index.name for index in listed.value or []] if listed.ok else []

        if item_type in names:
            logger.debug("index_already_exists", item_type=item_type)
            return

        created = await self._call("create_index", self._index_body(item_type))
        if created.ok:
            logger.info("index_created", item_type=item_type, preset=self.index_preset)
        else:
            logger.info("index_probably_exists", item_type=item_type)
