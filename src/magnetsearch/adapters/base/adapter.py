"""Base search adapter — Abstract interface for all search sources.

Every search source must implement this interface to integrate with
MagnetSearch. The adapter is responsible for:
  1. Executing search queries against its source
  2. Renaming raw records into the normalizer's ``RawRecord`` keys
  3. Reporting health status

Normalization itself is shared (see ``magnetsearch.core.normalizer``), so
every adapter obeys the same coercion and drop rules.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from magnetsearch.core.normalizer import RawRecord, normalize_record
from magnetsearch.models.adapter import AdapterInfo, AdapterRole
from magnetsearch.models.descriptor import ResourceDescriptor
from magnetsearch.models.query import SearchOptions


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class RawResults(BaseModel):
    """Raw records from a source before normalization."""

    documents: list[dict[str, Any]] = Field(default_factory=list, description="Raw record dicts")
    has_more: bool | None = Field(
        default=None,
        description="Source's own next-page signal (None when the source returned its complete result set)",
    )
    took_ms: int = Field(default=0, description="Source query time in ms")


class AdapterResults(BaseModel):
    """Normalized results of one adapter call."""

    items: list[ResourceDescriptor] = Field(default_factory=list, description="Normalized descriptors")
    has_more: bool | None = Field(default=None, description="Next-page signal for remotely paged sources")
    page_size: int | None = Field(default=None, description="Remote page size for remotely paged sources")

    @property
    def remotely_paged(self) -> bool:
        return self.has_more is not None


class SearchAdapter(ABC):
    """Abstract base class for search adapters.

    All adapters must implement:
      - id / name / description / endpoint: identity shown to clients
      - search(): Execute a query and return raw records
      - map_record(): Rename one raw record into ``RawRecord`` keys
      - health_check(): Report adapter health status

    Adapters are constructed once at startup and must be safe to share
    between concurrent requests.
    """

    #: True when the source slices pages itself and cannot report a total
    paginates_remotely: bool = False
    #: Items per remote page, for sources that page remotely
    remote_page_size: int = 0

    @property
    @abstractmethod
    def id(self) -> str:
        """Unique, stable adapter id (e.g. 'apibay', 'sample')."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name."""

    @property
    def description(self) -> str:
        return ""

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Remote endpoint URI, or a sentinel for local sources."""

    @property
    def trackers(self) -> list[str]:
        """Default trackers attached to results that carry none."""
        return []

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the adapter (connections, pools, etc.).

        Called once during application startup.
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources. Called during application shutdown."""

    @abstractmethod
    async def search(self, query: str, options: SearchOptions) -> RawResults:
        """Execute a search query against the source.

        Args:
            query: The search query string.
            options: Page and page size of the request.

        Returns:
            Raw records from the source.
        """

    @abstractmethod
    def map_record(self, raw_record: dict[str, Any]) -> RawRecord | None:
        """Rename a raw record into ``RawRecord`` keys.

        Returns None for records the source knows to be unusable.
        """

    @abstractmethod
    async def health_check(self) -> AdapterHealth:
        """Check the health of the source."""

    def info(self, role: AdapterRole = AdapterRole.STANDARD) -> AdapterInfo:
        """Describe this adapter for listings."""
        return AdapterInfo(
            id=self.id,
            name=self.name,
            description=self.description,
            endpoint=self.endpoint,
            role=role,
        )

    def normalize(self, raw_record: dict[str, Any]) -> ResourceDescriptor | None:
        """Map and normalize one raw record, or None if it must be dropped."""
        record = self.map_record(raw_record)
        if record is None:
            return None
        return normalize_record(record, source=self.id, trackers=self.trackers)

    async def search_and_normalize(self, query: str, options: SearchOptions) -> AdapterResults:
        """Search and normalize results in one step.

        Args:
            query: The search query string.
            options: Page and page size of the request.

        Returns:
            Normalized descriptors plus the source's paging signal.
        """
        raw = await self.search(query, options)
        items = [item for item in (self.normalize(doc) for doc in raw.documents) if item is not None]
        if not self.paginates_remotely:
            return AdapterResults(items=items)
        return AdapterResults(
            items=items,
            has_more=bool(raw.has_more),
            page_size=self.remote_page_size or None,
        )
