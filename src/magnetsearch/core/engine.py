"""MagnetSearch Engine — Core orchestrator for search requests.

The engine manages the full request lifecycle:
  1. Classification: empty query, direct magnet URI, or keyword search
  2. Primary search: one call to the requested (or default) adapter
  3. Fallback: one call to the fallback adapter when the primary failed or
     found nothing
  4. Pagination: computed locally, or passed through for remotely paged sources
  5. Outcome assembly

Adapter failures never escape ``search``; they are recorded on the outcome.
Only malformed requests (``EmptyQuery``, ``InvalidMagnetURI``) are raised.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import structlog

from magnetsearch.adapters.base.adapter import AdapterResults, SearchAdapter
from magnetsearch.adapters.base.registry import AdapterRegistry
from magnetsearch.core.errors import AllSourcesExhausted, EmptyQuery
from magnetsearch.core.magnet import is_magnet_uri, parse_magnet
from magnetsearch.core.pagination import clamp_page, paginate, paginate_remote
from magnetsearch.models.adapter import AdapterListResponse
from magnetsearch.models.query import SearchOptions
from magnetsearch.models.response import PageView, SearchOutcome

if TYPE_CHECKING:
    from magnetsearch.config.settings import Settings

logger = logging.getLogger(__name__)


class MagnetSearchEngine:
    """Core orchestrator for magnet searches.

    Pipeline:
      query → [magnet parser]                   → single-item outcome
            → [primary adapter] → [fallback?]   → [paginator] → SearchOutcome

    Primary and fallback run strictly one after the other, and each adapter
    is called at most once per request.

    Attributes:
        settings: Application configuration.
        adapter_registry: Registry of search adapters.
    """

    def __init__(self, settings: Settings, adapter_registry: AdapterRegistry | None = None) -> None:
        self.settings = settings
        self.adapter_registry = adapter_registry or AdapterRegistry()

    async def initialize(self) -> None:
        logger.info(
            "MagnetSearch engine initialized (page size: %d, adapters: %s)",
            self.settings.search.page_size,
            self.adapter_registry.active_adapters,
        )

    async def shutdown(self) -> None:
        """Gracefully shut down all components."""
        await self.adapter_registry.shutdown_all()
        logger.info("MagnetSearch engine shut down")

    def list_adapters(self) -> AdapterListResponse:
        """Describe the configured adapters, default first."""
        default = self.adapter_registry.get_default()
        return AdapterListResponse(
            adapters=self.adapter_registry.list_adapters(),
            default_adapter_id=default.id,
            fallback_adapter_id=self.adapter_registry.fallback_id,
        )

    # ──────────────────────────────────────────────────────────────────────
    # Search
    # ──────────────────────────────────────────────────────────────────────

    async def search(self, query: str | None, adapter_id: str | None = None, page: Any = None) -> SearchOutcome:
        """Serve one search request.

        Args:
            query: Keywords or a magnet URI. Surrounding whitespace is ignored.
            adapter_id: Adapter to query first; unknown or absent ids use the default.
            page: Requested 1-based page. Anything that is not an integer ≥ 1
                is treated as page 1.

        Returns:
            The assembled outcome, including any adapter errors.

        Raises:
            EmptyQuery: If the query is empty after trimming.
            InvalidMagnetURI: If a magnet-prefixed query cannot be parsed.
        """
        start_time = time.monotonic()
        text = (query or "").strip()
        if not text:
            raise EmptyQuery()

        with structlog.contextvars.bound_contextvars(query=text):
            if is_magnet_uri(text):
                return self._magnet_outcome(text, start_time)

            primary = self.adapter_registry.resolve(adapter_id)
            with structlog.contextvars.bound_contextvars(adapter=primary.id):
                return await self._search_adapters(text, primary, clamp_page(page), start_time)

    def _magnet_outcome(self, uri: str, start_time: float) -> SearchOutcome:
        descriptor = parse_magnet(uri)
        logger.info("Direct magnet link resolved: %s", descriptor.info_hash or descriptor.title)

        view = paginate([descriptor], 1, self.settings.search.page_size)
        return self._assemble(
            query=uri,
            mode="magnet",
            view=view,
            result_count=1,
            start_time=start_time,
        )

    async def _search_adapters(
        self,
        query: str,
        primary: SearchAdapter,
        page: int,
        start_time: float,
    ) -> SearchOutcome:
        options = SearchOptions(page=page, page_size=self.settings.search.page_size)

        # ── Primary ──
        results, primary_error = await self._attempt(primary, query, options)
        answering = results

        # ── Fallback ──
        fallback: SearchAdapter | None = None
        fallback_error: str | None = None
        fallback_used = False

        if results is None or not results.items:
            fallback = self.adapter_registry.fallback_for(primary.id)
            if fallback is None:
                fallback_error = str(
                    AllSourcesExhausted(f"No results from {primary.name} and no fallback source is available")
                )
            else:
                logger.info(
                    "Primary adapter %s %s, trying fallback %s",
                    primary.id,
                    "failed" if primary_error else "returned no results",
                    fallback.id,
                )
                fallback_results, fallback_error = await self._attempt(fallback, query, options)
                if fallback_results is not None and fallback_results.items:
                    answering = fallback_results
                    fallback_used = True
                elif fallback_error is None:
                    fallback_error = str(AllSourcesExhausted(f"No results from {primary.name} or {fallback.name}"))

        # ── Pagination ──
        view = self._paginate(answering, page)
        result_count = len(answering.items) if answering is not None else 0

        outcome = self._assemble(
            query=query,
            mode="search",
            view=view,
            result_count=result_count,
            start_time=start_time,
            primary=primary,
            fallback=fallback,
            fallback_used=fallback_used,
            primary_error=primary_error,
            fallback_error=fallback_error,
        )
        logger.info(
            "Search complete: %d results (page %d) from %s in %d ms",
            outcome.result_count,
            outcome.current_page,
            fallback.id if fallback_used and fallback else primary.id,
            outcome.processing_time_ms,
        )
        return outcome

    async def _attempt(
        self,
        adapter: SearchAdapter,
        query: str,
        options: SearchOptions,
    ) -> tuple[AdapterResults | None, str | None]:
        """Call *adapter* once, capturing any failure as a message."""
        try:
            return await adapter.search_and_normalize(query, options), None
        except Exception as e:
            logger.warning("Adapter %s failed: %s", adapter.id, e)
            return None, str(e) or type(e).__name__

    def _paginate(self, results: AdapterResults | None, page: int) -> PageView:
        page_size = self.settings.search.page_size
        if results is None:
            return paginate([], page, page_size)
        if results.remotely_paged:
            return paginate_remote(
                results.items,
                page,
                results.page_size or page_size,
                has_next=bool(results.has_more),
            )
        return paginate(results.items, page, page_size)

    @staticmethod
    def _assemble(
        *,
        query: str,
        mode: str,
        view: PageView,
        result_count: int,
        start_time: float,
        primary: SearchAdapter | None = None,
        fallback: SearchAdapter | None = None,
        fallback_used: bool = False,
        primary_error: str | None = None,
        fallback_error: str | None = None,
    ) -> SearchOutcome:
        return SearchOutcome(
            query=query,
            mode=mode,  # type: ignore[arg-type]
            items=view.page_items,
            result_count=result_count,
            adapter_used=primary.id if primary else None,
            adapter_name=primary.name if primary else None,
            adapter_description=primary.description if primary else None,
            adapter_endpoint=primary.endpoint if primary else None,
            fallback_used=fallback_used,
            fallback_adapter_id=fallback.id if fallback else None,
            fallback_adapter_name=fallback.name if fallback else None,
            primary_error=primary_error,
            fallback_error=fallback_error,
            current_page=view.current_page,
            page_size=view.page_size,
            has_prev_page=view.has_prev_page,
            has_next_page=view.has_next_page,
            total_pages=view.total_pages,
            processing_time_ms=int((time.monotonic() - start_time) * 1000),
        )
