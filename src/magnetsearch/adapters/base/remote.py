"""Remote adapter client — Bounded-time HTTP querying of a JSON search API.

Concrete remote adapters only describe *what* to send and how to read the
payload; this base class owns the ``httpx`` client, the per-call timeout and
the translation of transport failures into the adapter error taxonomy:

  - no answer within the timeout  → ``RemoteTimeout``
  - non-2xx status                → ``RemoteStatusError`` (status + truncated body)
  - body is not the expected JSON → ``RemoteShapeError``
  - anything else on the wire     → ``RemoteTransportError``

Calls are never retried here.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import abstractmethod
from datetime import UTC, datetime
from typing import Any

import httpx

from magnetsearch.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from magnetsearch.adapters.base.exceptions import (
    ConfigurationError,
    RemoteShapeError,
    RemoteStatusError,
    RemoteTimeout,
    RemoteTransportError,
)
from magnetsearch.models.query import SearchOptions

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 8000
DEFAULT_USER_AGENT = "magnetsearch/0.1 (+https://github.com/magnetsearch/magnetsearch)"
ERROR_BODY_LIMIT = 200


class RemoteSearchAdapter(SearchAdapter):
    """Base class for adapters backed by a remote JSON API.

    Args:
        endpoint: Search endpoint URL.
        trackers: Trackers attached to results built from a bare info-hash.
        timeout_ms: Per-call timeout in milliseconds.
        headers: Extra request headers (opaque to the adapter).
        api_key: Optional bearer token.
        page_size: Items per remote page (remotely paged sources only).
        **kwargs: Extra keyword arguments (ignored, for config compat).
    """

    default_endpoint: str = ""

    def __init__(
        self,
        endpoint: str | None = None,
        trackers: list[str] | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        headers: dict[str, str] | None = None,
        api_key: str | None = None,
        page_size: int | None = None,
        **kwargs: Any,
    ) -> None:
        self._endpoint = endpoint or self.default_endpoint
        self._trackers = list(trackers or [])
        self._timeout = timeout_ms / 1000
        self._headers = {
            "User-Agent": DEFAULT_USER_AGENT,
            "Accept": "application/json",
            **(headers or {}),
        }
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"
        if page_size:
            self.remote_page_size = page_size
        self._client: httpx.AsyncClient | None = None
        self._extra_kwargs = kwargs

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def trackers(self) -> list[str]:
        return list(self._trackers)

    @property
    def timeout_ms(self) -> int:
        return int(self._timeout * 1000)

    async def initialize(self) -> None:
        """Validate the endpoint and create the HTTP client.

        Raises:
            ConfigurationError: If the endpoint is not an absolute http(s) URL.
        """
        try:
            url = httpx.URL(self._endpoint)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid endpoint for adapter '{self.id}': {self._endpoint!r}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(f"Adapter '{self.id}' needs an absolute http(s) endpoint, got {self._endpoint!r}")

        self._client = httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            follow_redirects=True,
        )
        logger.info("%s adapter initialized (endpoint: %s, timeout: %d ms)", self.name, self._endpoint, self.timeout_ms)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Subclass hooks ───────────────────────────────────────────────────

    @abstractmethod
    def build_params(self, query: str, options: SearchOptions) -> dict[str, Any]:
        """Query-string parameters for one search call."""

    @abstractmethod
    def extract_documents(self, payload: Any) -> list[dict[str, Any]]:
        """Pull the record list out of a decoded payload.

        Raises:
            RemoteShapeError: If the payload does not have the expected shape.
        """

    def has_more(self, documents: list[dict[str, Any]]) -> bool | None:
        """Next-page signal for remotely paged sources: a full page came back."""
        if not self.paginates_remotely:
            return None
        return self.remote_page_size > 0 and len(documents) >= self.remote_page_size

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, query: str, options: SearchOptions) -> RawResults:
        """Query the remote endpoint once and return its raw records."""
        start = time.monotonic()
        payload = await self.fetch_json(self.build_params(query, options))
        documents = self.extract_documents(payload)
        took_ms = int((time.monotonic() - start) * 1000)

        logger.debug(
            "%s search: query=%s, page=%d, results=%d, took=%dms",
            self.id,
            query,
            options.page,
            len(documents),
            took_ms,
        )
        return RawResults(documents=documents, has_more=self.has_more(documents), took_ms=took_ms)

    async def fetch_json(self, params: dict[str, Any]) -> Any:
        """Issue one GET to the endpoint, bounded by the call timeout.

        The request is cancelled when the timeout expires; the timer is
        released on every exit path by the ``asyncio.timeout`` context.
        """
        if self._client is None:
            raise RemoteTransportError(f"{self.name} client not initialized.")

        try:
            async with asyncio.timeout(self._timeout):
                response = await self._client.get(self._endpoint, params=params)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise RemoteTimeout(f"{self.name} did not respond within {self.timeout_ms} ms") from e
        except httpx.RequestError as e:
            raise RemoteTransportError(f"{self.name} request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RemoteStatusError(response.status_code, response.text[:ERROR_BODY_LIMIT])

        try:
            return response.json()
        except ValueError as e:
            raise RemoteShapeError(f"{self.name} returned a body that is not valid JSON") from e

    # ── Health ───────────────────────────────────────────────────────────

    def health_params(self) -> dict[str, Any]:
        return self.build_params("ubuntu", SearchOptions())

    async def health_check(self) -> AdapterHealth:
        """Check the endpoint with a lightweight search."""
        if self._client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        start = time.monotonic()
        try:
            self.extract_documents(await self.fetch_json(self.health_params()))
        except (RemoteStatusError, RemoteShapeError) as e:
            return AdapterHealth(
                status="degraded",
                latency_ms=int((time.monotonic() - start) * 1000),
                last_check=datetime.now(UTC).isoformat(),
                message=str(e),
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))

        return AdapterHealth(
            status="healthy",
            latency_ms=int((time.monotonic() - start) * 1000),
            last_check=datetime.now(UTC).isoformat(),
            message=f"Endpoint: {self._endpoint}",
        )


def require_list(payload: Any, adapter_name: str) -> list[dict[str, Any]]:
    """Return the dict records of a JSON array payload.

    Raises:
        RemoteShapeError: If *payload* is not a JSON array.
    """
    if not isinstance(payload, list):
        raise RemoteShapeError(f"{adapter_name} returned an unexpected response format (expected a JSON array)")
    return [record for record in payload if isinstance(record, dict)]
