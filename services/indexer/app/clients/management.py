"""Doofinder Management API (v2) client."""

from typing import Any
from urllib.parse import quote

import httpx

from services.indexer.app.clients.base import BaseManagementClient
from services.indexer.app.core.errors import (
    DoofinderError,
    InvalidSearchEngine,
    error_from_response,
)
from services.indexer.app.core.schemas import IndexBody, IndexInfo, SearchEngine
from shared.utils.logging import get_logger
from shared.utils.metrics import track_api_call

logger = get_logger(__name__)


def normalize_host(api_host: str) -> str:
    """Add a scheme when missing and strip trailing slashes."""
    host = api_host.strip().rstrip("/")
    if not host.startswith(("http://", "https://")):
        host = f"https://{host}"
    return host


class ManagementClient(BaseManagementClient):
    """HTTP client for one search engine of the Doofinder Management API.

    https://docs.doofinder.com/api/management/v2/
    """

    def __init__(
        self,
        api_host: str,
        api_key: str,
        hashid: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize management client.

        Args:
            api_host: Management API host (scheme optional)
            api_key: Management API token
            hashid: Search engine hash ID
            timeout: Request timeout in seconds
            transport: Custom httpx transport (used by tests)
        """
        if not api_host or not api_key or not hashid:
            raise ValueError("api_host, api_key and hashid are required")

        self.base_url = normalize_host(api_host)
        self.api_key = api_key
        self.hashid = hashid
        self.timeout = httpx.Timeout(timeout)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def engine_path(self) -> str:
        return f"/api/v2/search_engines/{quote(self.hashid, safe='')}"

    def _index_path(self, index_name: str) -> str:
        return f"{self.engine_path}/indices/{quote(index_name, safe='')}"

    def _get_headers(self) -> dict:
        """Get request headers."""
        return {
            "Accept": "application/json",
            "Authorization": f"Token {self.api_key}",
        }

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._get_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Any = None,
    ) -> Any:
        """Make an API request and decode the JSON response.

        Args:
            operation: Operation name for logs and metrics
            method: HTTP method
            path: URL path
            json: JSON body

        Returns:
            Decoded response body, or None for empty responses

        Raises:
            DoofinderError: On transport failure or non-2xx status
        """
        client = await self.get_client()

        with track_api_call(operation):
            try:
                response = await client.request(method, path, json=json)
            except httpx.HTTPError as e:
                logger.error(
                    "management_api_transport_error",
                    operation=operation,
                    method=method,
                    path=path,
                    error=str(e),
                )
                raise DoofinderError(f"{operation} failed: {e}") from e

            logger.debug(
                "management_api_request",
                operation=operation,
                method=method,
                path=path,
                status=response.status_code,
            )

            if response.is_error:
                body = self._decode(response)
                raise error_from_response(
                    response.status_code,
                    f"{operation} failed with status {response.status_code}",
                    body,
                )

        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get_search_engine(self) -> SearchEngine:
        data = await self._request("get_search_engine", "GET", self.engine_path)
        if not data:
            raise InvalidSearchEngine(f"Empty search engine response for {self.hashid}")
        return SearchEngine.model_validate(data)

    async def list_indices(self) -> list[IndexInfo]:
        data = await self._request("list_indices", "GET", f"{self.engine_path}/indices")
        return [IndexInfo.model_validate(item) for item in data or []]

    async def create_index(self, body: IndexBody) -> IndexInfo:
        data = await self._request(
            "create_index",
            "POST",
            f"{self.engine_path}/indices",
            json=body.model_dump(),
        )
        return IndexInfo.model_validate(data or body.model_dump())

    async def create_temporary_index(self, index_name: str) -> None:
        await self._request(
            "create_temporary_index", "POST", f"{self._index_path(index_name)}/temp"
        )

    async def create_temp_bulk(
        self, index_name: str, items: list[dict[str, Any]]
    ) -> dict[str, Any]:
        data = await self._request(
            "create_temp_bulk",
            "POST",
            f"{self._index_path(index_name)}/temp/items/_bulk",
            json=items,
        )
        return data or {}

    async def update_item(
        self, index_name: str, item_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        result = await self._request(
            "update_item",
            "PATCH",
            f"{self._index_path(index_name)}/items/{quote(str(item_id), safe='')}",
            json=data,
        )
        return result or {}

    async def create_item(self, index_name: str, data: dict[str, Any]) -> dict[str, Any]:
        result = await self._request(
            "create_item",
            "POST",
            f"{self._index_path(index_name)}/items",
            json=data,
        )
        return result or {}

    async def delete_item(self, index_name: str, item_id: str) -> None:
        await self._request(
            "delete_item",
            "DELETE",
            f"{self._index_path(index_name)}/items/{quote(str(item_id), safe='')}",
        )

    async def replace_index(self, index_name: str) -> None:
        await self._request(
            "replace_index",
            "POST",
            f"{self._index_path(index_name)}/_replace_by_temp",
        )
