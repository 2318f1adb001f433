"""Tests for the hashlist HTTP client."""

import json

import httpx
import pytest

from hashlist_crawler.ingestion.config import HashlistConfig, HttpConfig
from hashlist_crawler.ingestion.crawler import HashlistClient, parse_manifest
from hashlist_crawler.ingestion.errors import ManifestError

MANIFEST_URL = "https://api.example.test/repos/hashlists/git/trees/main?recursive=1"
BASE_URL = "https://raw.example.test/hashlists/main"


def make_client(handler, token: str | None = None) -> HashlistClient:
    return HashlistClient(
        HashlistConfig(manifest_url=MANIFEST_URL, download_base_url=BASE_URL),
        HttpConfig(github_token=token),
        transport=httpx.MockTransport(handler),
    )


class TestParseManifest:
    """Tests for parse_manifest."""

    def test_entries_in_order(self) -> None:
        """Test tree items become entries in order."""
        body = json.dumps({"tree": [{"path": "b.html"}, {"path": "a.html", "type": "blob"}]})
        entries = parse_manifest(body)
        assert [e.path for e in entries] == ["b.html", "a.html"]

    def test_missing_path(self) -> None:
        """Test items without a path get an empty path."""
        entries = parse_manifest({"tree": [{"type": "tree"}, "junk", {"path": "x.html"}]})
        assert [e.path for e in entries] == ["", "", "x.html"]

    def test_bytes_body(self) -> None:
        """Test raw bytes are accepted."""
        assert parse_manifest(b'{"tree": []}') == []

    @pytest.mark.parametrize(
        "body",
        ["not json", "[]", '{"sha": "abc"}', '{"tree": {"path": "a"}}'],
    )
    def test_invalid_manifest(self, body: str) -> None:
        """Test malformed documents raise ManifestError."""
        with pytest.raises(ManifestError):
            parse_manifest(body)


class TestHashlistClient:
    """Tests for HashlistClient against a mock transport."""

    @pytest.mark.asyncio
    async def test_headers_with_token(self) -> None:
        """Test requests carry the user agent and bearer token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"tree": []})

        async with make_client(handler, token="secret") as client:
            await client.fetch_manifest()

        assert seen[0].headers["User-Agent"] == "curl"
        assert seen[0].headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_headers_without_token(self) -> None:
        """Test no Authorization header is sent without a token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"tree": []})

        async with make_client(handler) as client:
            await client.fetch_manifest()

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_fetch_manifest(self) -> None:
        """Test the manifest URL is requested and parsed."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == MANIFEST_URL
            return httpx.Response(200, json={"tree": [{"path": "p1.html"}, {"path": "p2.html"}]})

        async with make_client(handler) as client:
            entries = await client.fetch_manifest()

        assert [e.path for e in entries] == ["p1.html", "p2.html"]

    @pytest.mark.asyncio
    async def test_fetch_page(self) -> None:
        """Test pages are fetched from the download base URL."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == f"{BASE_URL}/p1.html"
            return httpx.Response(200, text="<html>page</html>")

        async with make_client(handler) as client:
            assert await client.fetch_page("p1.html") == "<html>page</html>"

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        """Test HTTP error statuses are raised."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with make_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.fetch_page("missing.html")

    @pytest.mark.asyncio
    async def test_manifest_without_tree(self) -> None:
        """Test a response without a tree raises ManifestError."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": "API rate limit exceeded"})

        async with make_client(handler) as client:
            with pytest.raises(ManifestError):
                await client.fetch_manifest()
