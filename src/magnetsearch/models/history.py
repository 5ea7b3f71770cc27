"""Search history models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from magnetsearch.models.descriptor import ResourceDescriptor


class HistoryEntry(BaseModel):
    """One recorded search, with a bounded copy of its results."""

    id: str = Field(description="Unique entry id")
    query: str = Field(description="The trimmed query")
    created_at: datetime = Field(description="When the search was recorded (UTC)")
    mode: Literal["search", "magnet"] = Field(description="'magnet' for direct magnet URIs, else 'search'")
    adapter_used: str | None = Field(default=None, description="Id of the adapter queried first")
    fallback_used: bool = Field(default=False, description="Whether the results came from the fallback")
    result_count: int = Field(default=0, description="Number of results kept on this entry")
    results: list[ResourceDescriptor] = Field(default_factory=list, description="Kept results")


class HistoryListResponse(BaseModel):
    """Response of the history listing operation."""

    entries: list[HistoryEntry] = Field(default_factory=list, description="Entries, newest first")
