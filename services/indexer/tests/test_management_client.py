"""Tests for the Doofinder management API client."""

import json

import httpx
import pytest

from services.indexer.app.clients import build_client
from services.indexer.app.clients.management import ManagementClient, normalize_host
from services.indexer.app.clients.throttle import Throttle
from services.indexer.app.config import Settings
from services.indexer.app.core.errors import (
    BadRequest,
    DoofinderError,
    InvalidSearchEngine,
    NotAllowed,
    NotFound,
    QuotaExhausted,
    ServerError,
)
from services.indexer.app.core.schemas import IndexBody


class RecordingTransport:
    """Mock transport that records requests and replays queued responses."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_client(recorder: RecordingTransport) -> ManagementClient:
    return ManagementClient(
        api_host="eu1-api.doofinder.com",
        api_key="secret-token",
        hashid="abc123",
        transport=recorder.transport,
    )


class TestNormalizeHost:
    """Tests for API host normalisation."""

    def test_adds_scheme(self):
        assert normalize_host("eu1-api.doofinder.com") == "https://eu1-api.doofinder.com"

    def test_keeps_scheme_and_strips_slash(self):
        assert normalize_host("http://localhost:8080/") == "http://localhost:8080"


class TestManagementClientInit:
    """Tests for client construction."""

    def test_requires_credentials(self):
        """Test every credential is required."""
        with pytest.raises(ValueError):
            ManagementClient(api_host="", api_key="key", hashid="abc123")

    @pytest.mark.asyncio
    async def test_get_client_creates_client(self):
        """Test HTTP client is created lazily and reused."""
        client = ManagementClient("eu1-api.doofinder.com", "key", "abc123")

        http_client = await client.get_client()

        assert isinstance(http_client, httpx.AsyncClient)
        assert await client.get_client() is http_client
        await client.close()
        assert client._client is None


class TestManagementClientRequests:
    """Tests for request building and response decoding."""

    @pytest.mark.asyncio
    async def test_get_search_engine(self):
        """Test search engine lookup."""
        recorder = RecordingTransport(
            httpx.Response(
                200,
                json={
                    "hashid": "abc123",
                    "name": "Test Store",
                    "language": "en",
                    "indices": [{"name": "product", "preset": "product"}],
                },
            )
        )
        client = make_client(recorder)

        engine = await client.get_search_engine()

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url == "https://eu1-api.doofinder.com/api/v2/search_engines/abc123"
        assert request.headers["Authorization"] == "Token secret-token"
        assert engine.hashid == "abc123"
        assert engine.indices[0].name == "product"
        await client.close()

    @pytest.mark.asyncio
    async def test_get_search_engine_empty(self):
        """Test an empty body is an invalid search engine."""
        client = make_client(RecordingTransport(httpx.Response(200)))

        with pytest.raises(InvalidSearchEngine):
            await client.get_search_engine()
        await client.close()

    @pytest.mark.asyncio
    async def test_list_indices(self):
        """Test index listing."""
        recorder = RecordingTransport(
            httpx.Response(200, json=[{"name": "product"}, {"name": "post", "preset": "generic"}])
        )
        client = make_client(recorder)

        indices = await client.list_indices()

        assert [index.name for index in indices] == ["product", "post"]
        assert recorder.requests[0].url.path == "/api/v2/search_engines/abc123/indices"
        await client.close()

    @pytest.mark.asyncio
    async def test_create_index(self):
        """Test index creation body."""
        recorder = RecordingTransport(
            httpx.Response(201, json={"name": "post", "preset": "generic"})
        )
        client = make_client(recorder)

        index = await client.create_index(IndexBody(name="post", preset="generic"))

        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/v2/search_engines/abc123/indices"
        assert json.loads(request.content) == {"name": "post", "preset": "generic"}
        assert index.name == "post"
        await client.close()

    @pytest.mark.asyncio
    async def test_temporary_index_paths(self):
        """Test temporary index lifecycle endpoints."""
        recorder = RecordingTransport(
            httpx.Response(201),
            httpx.Response(200, json={"errors": False}),
            httpx.Response(200),
        )
        client = make_client(recorder)
        items = [{"id": "1", "title": "Lamp"}]

        await client.create_temporary_index("product")
        result = await client.create_temp_bulk("product", items)
        await client.replace_index("product")

        calls = [(r.method, r.url.path) for r in recorder.requests]
        assert calls == [
            ("POST", "/api/v2/search_engines/abc123/indices/product/temp"),
            ("POST", "/api/v2/search_engines/abc123/indices/product/temp/items/_bulk"),
            ("POST", "/api/v2/search_engines/abc123/indices/product/_replace_by_temp"),
        ]
        assert json.loads(recorder.requests[1].content) == items
        assert result == {"errors": False}
        await client.close()

    @pytest.mark.asyncio
    async def test_item_paths(self):
        """Test item endpoints."""
        recorder = RecordingTransport(
            httpx.Response(200, json={"id": "7"}),
            httpx.Response(201, json={"id": "8"}),
            httpx.Response(204),
        )
        client = make_client(recorder)

        await client.update_item("post", "7", {"title": "Hello"})
        await client.create_item("post", {"id": "8", "title": "World"})
        await client.delete_item("post", "7")

        calls = [(r.method, r.url.path) for r in recorder.requests]
        assert calls == [
            ("PATCH", "/api/v2/search_engines/abc123/indices/post/items/7"),
            ("POST", "/api/v2/search_engines/abc123/indices/post/items"),
            ("DELETE", "/api/v2/search_engines/abc123/indices/post/items/7"),
        ]
        assert json.loads(recorder.requests[0].content) == {"title": "Hello"}
        await client.close()


class TestManagementClientErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, error_type",
        [
            (400, BadRequest),
            (403, NotAllowed),
            (404, NotFound),
            (422, BadRequest),
            (429, QuotaExhausted),
            (503, ServerError),
        ],
    )
    async def test_status_codes(self, status_code, error_type):
        """Test non-2xx statuses raise their taxonomy error."""
        body = {"error": {"code": "some_code", "message": "Something happened"}}
        client = make_client(RecordingTransport(httpx.Response(status_code, json=body)))

        with pytest.raises(error_type) as exc_info:
            await client.create_temporary_index("product")

        assert exc_info.value.status_code == status_code
        assert exc_info.value.body == body
        await client.close()

    @pytest.mark.asyncio
    async def test_text_error_body(self):
        """Test non-JSON error bodies are kept as text."""
        client = make_client(
            RecordingTransport(httpx.Response(502, text="Bad Gateway"))
        )

        with pytest.raises(ServerError) as exc_info:
            await client.replace_index("product")

        assert exc_info.value.get_body() == "Bad Gateway"
        await client.close()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test network failures raise DoofinderError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ManagementClient(
            api_host="eu1-api.doofinder.com",
            api_key="key",
            hashid="abc123",
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(DoofinderError) as exc_info:
            await client.list_indices()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        await client.close()


class TestBuildClient:
    """Tests for client construction from settings."""

    def test_missing_credentials(self):
        """Test incomplete credentials give no client."""
        settings = Settings(api_key="key", api_host="", search_engine_hash="abc123")

        assert build_client(settings) is None

    def test_throttled_client(self):
        """Test a complete configuration gives a throttled client."""
        settings = Settings(
            api_key="key",
            api_host="eu1-api.doofinder.com",
            search_engine_hash="abc123",
            rate_limit=5.0,
        )

        client = build_client(settings)

        assert isinstance(client, Throttle)
        assert isinstance(client.client, ManagementClient)
        assert client.client.hashid == "abc123"
        assert client.limiter.rate == 5.0
