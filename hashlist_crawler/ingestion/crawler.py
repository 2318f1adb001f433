"""
Hashlist Client Module
======================

HTTP access to the hashlist repository: the tree manifest listing every
page, and the raw page content.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from hashlist_crawler.core.schema import ManifestEntry
from hashlist_crawler.ingestion.config import HashlistConfig, HttpConfig
from hashlist_crawler.ingestion.errors import ManifestError

logger = logging.getLogger(__name__)


def parse_manifest(body: str | bytes | dict[str, Any]) -> list[ManifestEntry]:
    """
    Parse a repository tree document into manifest entries.

    Args:
        body: JSON text or an already decoded document with a ``tree`` array

    Returns:
        Entries in manifest order

    Raises:
        ManifestError: If the document is not JSON or has no ``tree`` array
    """
    if isinstance(body, dict):
        data = body
    else:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "tree" not in data:
        raise ManifestError("Manifest has no 'tree' property")

    tree = data["tree"]
    if not isinstance(tree, list):
        raise ManifestError(f"Manifest 'tree' must be an array, got {type(tree).__name__}")

    return [ManifestEntry.from_item(item) for item in tree]


class HashlistClient:
    """
    Async client for the hashlist repository.

    Every request carries the configured user agent and, when a token is set,
    a bearer Authorization header. HTTP errors are raised to the caller.
    """

    def __init__(
        self,
        hashlist: HashlistConfig | None = None,
        http: HttpConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.hashlist = hashlist or HashlistConfig()
        self.http = http or HttpConfig()

        headers = {"User-Agent": self.http.user_agent}
        if self.http.github_token:
            headers["Authorization"] = f"Bearer {self.http.github_token}"

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=self.http.request_timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> HashlistClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def fetch_manifest(self) -> list[ManifestEntry]:
        """
        Fetch the list of hashlist pages.

        Raises:
            httpx.HTTPError: If the request fails
            ManifestError: If the response is not a tree document
        """
        response = await self._client.get(self.hashlist.manifest_url)
        response.raise_for_status()
        return parse_manifest(response.text)

    async def fetch_page(self, path: str) -> str:
        """
        Fetch the raw content of one hashlist page.

        Args:
            path: Manifest path of the page

        Raises:
            httpx.HTTPError: If the request fails
        """
        url = self.hashlist.page_url(path)
        logger.debug(f"Fetching hashlist page {url}")
        response = await self._client.get(url)
        response.raise_for_status()
        return response.text
