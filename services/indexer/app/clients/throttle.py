"""Client-side throttling for the management API."""

import asyncio
import time
from typing import Any, Awaitable, Callable

from services.indexer.app.clients.base import BaseManagementClient
from services.indexer.app.core.schemas import IndexBody, IndexInfo, SearchEngine
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """Token bucket rate limiter.

    With burst=1 consecutive acquisitions are spaced at least 1 / rate
    seconds apart.
    """

    def __init__(
        self,
        rate: float,
        burst: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize rate limiter.

        Args:
            rate: Requests per second
            burst: Maximum burst size
            clock: Monotonic clock, in seconds
            sleep: Coroutine used to wait
        """
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")

        self.rate = rate
        self.burst = burst
        self.tokens = float(burst)
        self._clock = clock
        self._sleep = sleep
        self.last_update = clock()
        self._lock = asyncio.Lock()

    async def acquire(self) -> float:
        """Acquire a token, waiting if necessary.

        Returns:
            Seconds spent waiting
        """
        async with self._lock:
            now = self._clock()
            elapsed = now - self.last_update
            self.tokens = min(self.burst, self.tokens + elapsed * self.rate)
            self.last_update = now

            if self.tokens >= 1:
                self.tokens -= 1
                return 0.0

            wait_time = (1 - self.tokens) / self.rate
            logger.debug("rate_limit_wait", wait_seconds=round(wait_time, 3))
            await self._sleep(wait_time)
            self.tokens = 0
            self.last_update = self._clock()
            return wait_time


class Throttle(BaseManagementClient):
    """Wrap a management client so every call waits for the rate limiter.

    Errors raised by the wrapped client propagate unchanged.
    """

    def __init__(self, client: BaseManagementClient, limiter: RateLimiter):
        self.client = client
        self.limiter = limiter

    async def _call(self, operation: str, *args: Any) -> Any:
        await self.limiter.acquire()
        return await getattr(self.client, operation)(*args)

    async def get_search_engine(self) -> SearchEngine | None:
        return await self._call("get_search_engine")

    async def list_indices(self) -> list[IndexInfo]:
        return await self._call("list_indices")

    async def create_index(self, body: IndexBody) -> IndexInfo:
        return await self._call("create_index", body)

    async def create_temporary_index(self, index_name: str) -> None:
        return await self._call("create_temporary_index", index_name)

    async def create_temp_bulk(
        self, index_name: str, items: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return await self._call("create_temp_bulk", index_name, items)

    async def update_item(
        self, index_name: str, item_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._call("update_item", index_name, item_id, data)

    async def create_item(self, index_name: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._call("create_item", index_name, data)

    async def delete_item(self, index_name: str, item_id: str) -> None:
        return await self._call("delete_item", index_name, item_id)

    async def replace_index(self, index_name: str) -> None:
        return await self._call("replace_index", index_name)

    async def close(self) -> None:
        """Close the wrapped client. Not throttled."""
        await self.client.close()
