"""Base management client interface."""

from abc import ABC, abstractmethod
from typing import Any

from services.indexer.app.core.schemas import IndexBody, IndexInfo, SearchEngine


class BaseManagementClient(ABC):
    """Abstract base class for Doofinder management API clients.

    Every operation raises a DoofinderError subclass on failure.
    """

    @abstractmethod
    async def get_search_engine(self) -> SearchEngine | None:
        """Fetch the configured search engine.

        Raises:
            NotFound: If the hash does not match a search engine
            InvalidSearchEngine: If the engine exists but is unusable
        """
        pass

    @abstractmethod
    async def list_indices(self) -> list[IndexInfo]:
        """List the indices of the search engine."""
        pass

    @abstractmethod
    async def create_index(self, body: IndexBody) -> IndexInfo:
        """Create a production index."""
        pass

    @abstractmethod
    async def create_temporary_index(self, index_name: str) -> None:
        """Create the temporary counterpart of an existing index.

        Raises:
            NotFound: If the production index does not exist
        """
        pass

    @abstractmethod
    async def create_temp_bulk(
        self, index_name: str, items: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Upload a batch of items into the temporary index."""
        pass

    @abstractmethod
    async def update_item(
        self, index_name: str, item_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Update an item in place.

        Raises:
            BadRequest: If the item or its index does not exist
        """
        pass

    @abstractmethod
    async def create_item(self, index_name: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create an item in the production index."""
        pass

    @abstractmethod
    async def delete_item(self, index_name: str, item_id: str) -> None:
        """Delete an item by id."""
        pass

    @abstractmethod
    async def replace_index(self, index_name: str) -> None:
        """Atomically swap the temporary index into production."""
        pass

    async def close(self) -> None:
        """Clean up any resources."""
        pass
