"""Test fixtures for indexer service."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from services.indexer.app.clients.base import BaseManagementClient
from services.indexer.app.core.indexer import DoofinderIndexer
from services.indexer.app.core.last_modified import InMemoryLastModifiedStore
from services.indexer.app.core.registry import TemporaryIndexRegistry
from services.indexer.app.core.schemas import IndexInfo, SearchEngine


@pytest.fixture
def sample_search_engine():
    """Sample search engine handle."""
    return SearchEngine(
        hashid="abc123",
        name="Test Store",
        language="en",
        site_url="https://store.example.com",
        indices=[IndexInfo(name="product", preset="product")],
    )


@pytest.fixture
def mock_client(sample_search_engine):
    """Create mock management client."""
    client = AsyncMock(spec=BaseManagementClient)
    client.get_search_engine.return_value = sample_search_engine
    client.list_indices.return_value = [IndexInfo(name="product", preset="product")]
    client.create_temp_bulk.return_value = {"errors": False}
    return client


@pytest.fixture
def last_modified():
    """Create last-modified store."""
    return InMemoryLastModifiedStore()


@pytest.fixture
def registry():
    """Create an empty temporary index registry."""
    return TemporaryIndexRegistry()


@pytest_asyncio.fixture
async def indexer(mock_client, last_modified):
    """Create a connected indexer with call history cleared."""
    indexer = DoofinderIndexer(mock_client, language="en", last_modified=last_modified)
    await indexer.connect()
    mock_client.reset_mock()
    return indexer


@pytest.fixture
def sample_items():
    """Sample serialized items."""
    return [
        {
            "id": "101",
            "title": "Solar Lantern",
            "link": "https://store.example.com/solar-lantern",
            "price": 24.9,
            "categories": ["Outdoor", "Lighting"],
        },
        {
            "id": "102",
            "title": "Camping Stove",
            "link": "https://store.example.com/camping-stove",
            "price": 59.0,
            "categories": ["Outdoor"],
        },
        {
            "id": "103",
            "title": "Trail Map",
            "link": "https://store.example.com/trail-map",
            "price": 7.5,
            "categories": ["Books"],
        },
    ]
