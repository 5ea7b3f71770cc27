"""Resource descriptor — Canonical schema for every search result.

Every adapter (remote API, local dataset, magnet parser) produces results in
this single shape so that clients never have to care which source answered.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

UNKNOWN_CATEGORY = "Unknown"
UNTITLED = "Untitled"


class ResourceDescriptor(BaseModel):
    """A normalized, downloadable-resource search result.

    Numeric fields use ``None`` for "unknown", which is distinct from a known
    ``0`` (e.g. a torrent that is confirmed to have no seeders).
    """

    title: str = Field(description="Display title of the resource")
    magnet_uri: str | None = Field(default=None, description="Magnet URI (absent for metadata-only entries)")
    info_hash: str | None = Field(default=None, description="Upper-case hex BitTorrent info-hash")
    size_bytes: int | None = Field(default=None, ge=0, description="Total size in bytes")
    size_label: str | None = Field(default=None, description="Human-readable size, e.g. '5.0 GB'")
    seeders: int | None = Field(default=None, ge=0, description="Seeder count (None = unknown)")
    leechers: int | None = Field(default=None, ge=0, description="Leecher count (None = unknown)")
    uploaded_at: datetime | None = Field(default=None, description="Upload timestamp (UTC)")
    category: str = Field(default=UNKNOWN_CATEGORY, description="Content category label")
    trackers: list[str] = Field(default_factory=list, description="Announce URLs, in order")
    source: str = Field(description="Identifier of the adapter that produced this record")
