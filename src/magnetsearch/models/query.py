"""Query models passed from the engine to adapters."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchOptions(BaseModel):
    """Options controlling a single adapter call.

    Adapters that return a complete result set ignore ``page``; adapters that
    page remotely forward it to their backend.
    """

    page: int = Field(default=1, ge=1, description="Requested page (1-based)")
    page_size: int = Field(default=10, ge=1, le=100, description="Results per page")
