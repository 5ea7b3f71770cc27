"""Search response models — Structured output of the search orchestrator.

A request either fails outright (empty query, malformed magnet URI) or
produces a ``SearchOutcome``. Degraded requests (fallback used, every source
empty or failing) are still outcomes; the error fields describe what went
wrong so the presentation layer can decide how loudly to report it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from magnetsearch.models.descriptor import ResourceDescriptor

# ═══════════════════════════════════════════════════════════════════════════════
# Pagination
# ═══════════════════════════════════════════════════════════════════════════════


class PageView(BaseModel):
    """One page of results plus navigation metadata.

    ``total_pages`` is ``None`` when the source pages remotely and cannot
    report a total; ``has_next_page`` is then the source's own signal.
    """

    current_page: int = Field(ge=1, description="1-based page number actually served")
    page_size: int = Field(ge=1, description="Maximum items per page")
    has_prev_page: bool = Field(description="Whether a previous page exists")
    has_next_page: bool = Field(description="Whether a next page exists")
    total_pages: int | None = Field(default=None, description="Total pages, when computable")
    page_items: list[ResourceDescriptor] = Field(default_factory=list, description="Items on this page")


# ═══════════════════════════════════════════════════════════════════════════════
# Search outcome
# ═══════════════════════════════════════════════════════════════════════════════


class SearchOutcome(BaseModel):
    """Result of one search request, with pagination fields flattened in."""

    query: str = Field(description="The trimmed query as received")
    mode: Literal["search", "magnet"] = Field(description="'magnet' for direct magnet URIs, else 'search'")
    items: list[ResourceDescriptor] = Field(default_factory=list, description="Items on the requested page")
    result_count: int = Field(default=0, description="Number of items the answering source produced")

    # Adapter routing
    adapter_used: str | None = Field(default=None, description="Id of the adapter that was queried first")
    adapter_name: str | None = Field(default=None, description="Display name of that adapter")
    adapter_description: str | None = Field(default=None, description="Description of that adapter")
    adapter_endpoint: str | None = Field(default=None, description="Endpoint of that adapter")
    fallback_used: bool = Field(default=False, description="True iff the returned items came from the fallback")
    fallback_adapter_id: str | None = Field(default=None, description="Fallback adapter id, when one was tried")
    fallback_adapter_name: str | None = Field(default=None, description="Fallback adapter name, when one was tried")
    primary_error: str | None = Field(default=None, description="Error raised by the primary adapter")
    fallback_error: str | None = Field(default=None, description="Error from the fallback path")

    # Pagination
    current_page: int = Field(default=1, ge=1, description="1-based page number")
    page_size: int = Field(default=10, ge=1, description="Maximum items per page")
    has_prev_page: bool = Field(default=False, description="Whether a previous page exists")
    has_next_page: bool = Field(default=False, description="Whether a next page exists")
    total_pages: int | None = Field(default=None, description="Total pages, when computable")

    processing_time_ms: int = Field(default=0, description="Time spent serving the request in ms")


class ErrorDetail(BaseModel):
    """Machine-readable request-level error."""

    code: str = Field(description="Stable error code, e.g. 'empty_query'")
    message: str = Field(description="Human-readable explanation")


class ErrorResponse(BaseModel):
    """Body of a 4xx response: the error sits under ``detail``."""

    detail: ErrorDetail
