"""MagnetSearch Python SDK — Async and sync clients for the MagnetSearch REST API.

Usage::

    # Async
    async with AsyncMagnetSearchClient("http://localhost:3001") as client:
        outcome = await client.search("ubuntu 24.04")

    # Sync (wraps async client internally)
    client = MagnetSearchClient("http://localhost:3001")
    outcome = client.search("ubuntu 24.04", adapter="nyaa", page=2)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, TypeVar, cast

import httpx

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Response types (plain dicts, decoupled from the server models)
# ═══════════════════════════════════════════════════════════════════════════════

SearchResult = dict[str, Any]
"""Search outcome dict (mirrors ``SearchOutcome`` JSON)."""

AdapterList = dict[str, Any]
"""Adapter listing dict (mirrors ``AdapterListResponse`` JSON)."""

HistoryList = dict[str, Any]
"""History listing dict (mirrors ``HistoryListResponse`` JSON)."""


# ═══════════════════════════════════════════════════════════════════════════════
# Async client
# ═══════════════════════════════════════════════════════════════════════════════


class AsyncMagnetSearchClient:
    """Async Python client for the MagnetSearch API.

    Args:
        base_url: MagnetSearch server URL, e.g. ``"http://localhost:3001"``.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.

    Example::

        async with AsyncMagnetSearchClient("http://localhost:3001") as client:
            outcome = await client.search("big buck bunny")
            for item in outcome["items"]:
                print(item["title"], item["magnet_uri"])
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            **httpx_kwargs,
        )

    async def __aenter__(self) -> AsyncMagnetSearchClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── Health ──

    async def health(self) -> dict[str, Any]:
        """Check server health."""
        resp = await self._client.get("/v1/health")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    async def adapter_health(self) -> dict[str, Any]:
        """Check adapter health.

        Returns:
            Per-adapter health status dict.
        """
        resp = await self._client.get("/v1/health/adapters")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Adapters ──

    async def list_adapters(self) -> AdapterList:
        """List configured adapters, default first."""
        resp = await self._client.get("/v1/adapters")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── Search ──

    async def search(
        self,
        query: str,
        *,
        adapter: str | None = None,
        page: int | None = None,
    ) -> SearchResult:
        """Search for magnet links, or resolve a magnet URI.

        Args:
            query: Keywords or a ``magnet:?`` URI.
            adapter: Adapter id to query first (server default when None).
            page: 1-based page number.

        Returns:
            Search outcome as a dict.

        Raises:
            httpx.HTTPStatusError: On an empty query or malformed magnet URI
                (HTTP 400, ``detail`` carries ``code`` and ``message``).
        """
        params: dict[str, Any] = {"q": query}
        if adapter:
            params["adapter"] = adapter
        if page is not None:
            params["page"] = page
        resp = await self._client.get("/v1/search", params=params)
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())

    # ── History ──

    async def history(self) -> HistoryList:
        """List recently served searches, newest first."""
        resp = await self._client.get("/v1/history")
        resp.raise_for_status()
        return cast(dict[str, Any], resp.json())


# ═══════════════════════════════════════════════════════════════════════════════
# Sync client (wraps AsyncMagnetSearchClient)
# ═══════════════════════════════════════════════════════════════════════════════


class MagnetSearchClient:
    """Synchronous Python client for the MagnetSearch API.

    Wraps :class:`AsyncMagnetSearchClient` using ``asyncio.run``.

    Args:
        base_url: MagnetSearch server URL.
        timeout: Request timeout in seconds.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        *,
        timeout: float = 30.0,
        **httpx_kwargs: Any,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._httpx_kwargs = httpx_kwargs

    def _run(self, coro: Coroutine[Any, Any, _T]) -> _T:
        """Run an async coroutine synchronously."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already inside an event loop (e.g. Jupyter), run on a worker thread
            import concurrent.futures

            with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
                return pool.submit(asyncio.run, coro).result()
        return asyncio.run(coro)

    def _make_client(self) -> AsyncMagnetSearchClient:
        return AsyncMagnetSearchClient(
            self._base_url,
            timeout=self._timeout,
            **self._httpx_kwargs,
        )

    def health(self) -> dict[str, Any]:
        """Check server health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.health()

        return self._run(_call())

    def adapter_health(self) -> dict[str, Any]:
        """Check adapter health."""

        async def _call() -> dict[str, Any]:
            async with self._make_client() as c:
                return await c.adapter_health()

        return self._run(_call())

    def list_adapters(self) -> AdapterList:
        async def _call() -> AdapterList:
            async with self._make_client() as c:
                return await c.list_adapters()

        return self._run(_call())

    def search(
        self,
        query: str,
        *,
        adapter: str | None = None,
        page: int | None = None,
    ) -> SearchResult:
        """Search for magnet links, or resolve a magnet URI."""

        async def _call() -> SearchResult:
            async with self._make_client() as c:
                return await c.search(query, adapter=adapter, page=page)

        return self._run(_call())

    def history(self) -> HistoryList:
        async def _call() -> HistoryList:
            async with self._make_client() as c:
                return await c.history()

        return self._run(_call())
