"""HTTP/HTTPS schema source.

Fetches the schema distribution from a web server or CDN, e.g.
``https://cdn.jsdelivr.net/npm/@openstreetmap/id-tagging-schema@6/dist``.
Requests are not retried; retry policy belongs to the caller.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urljoin

import httpx
from loguru import logger

from .base import BaseSchemaSource, SourceFetchError


class HTTPSchemaSource(BaseSchemaSource):
    """Schema source for an HTTP-served distribution directory.

    Example:
        async with HTTPSchemaSource("https://cdn.example.com/schema/dist") as source:
            presets = await source.read_json("presets.json")
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        user_agent: str = "osmtags/1.0 (Tagging Schema Query)",
    ) -> None:
        """Initialize HTTP source.

        Args:
            base_url: URL of the distribution directory.
            timeout_seconds: Request timeout in seconds.
            user_agent: User-Agent header value.
        """
        super().__init__(base_url)
        self._base_url = base_url.rstrip("/") + "/"
        self._timeout = timeout_seconds
        self._user_agent = user_agent
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def describe(self, name: str) -> str:
        return urljoin(self._base_url, name)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent, "Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client if open."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def read_json(self, name: str, *, optional: bool = False) -> Any:
        url = self.describe(name)
        client = self._get_client()

        try:
            response = await client.get(url)
        except httpx.TimeoutException:
            raise SourceFetchError(url, "request timed out")
        except httpx.RequestError as e:
            raise SourceFetchError(url, str(e))

        if response.status_code == 404 and optional:
            logger.debug(f"Optional schema file not found: {url}")
            return None

        if response.is_error:
            raise SourceFetchError(url, f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise SourceFetchError(url, f"invalid JSON: {e}")
