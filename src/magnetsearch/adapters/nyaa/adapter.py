"""Nyaa adapters — Anime and Sukebei trackers via the community nyaaapi service.

API reference:
  GET https://nyaaapi.onrender.com/nyaa?q=<query>&page=<n>
    → JSON array of ``{name, info_hash, magnet, seeders, leechers, size, date, category}``
  GET https://nyaaapi.onrender.com/sukebei?q=<query>&page=<n>
    → ``{"count": <n>, "data": [{title, magnet, seeders, leechers, size, time, category}]}``

Both sources page remotely and never report a total, so the requested page
is forwarded and a full page is taken as the next-page signal.
"""

from __future__ import annotations

from typing import Any

from magnetsearch.adapters.base.exceptions import RemoteShapeError
from magnetsearch.adapters.base.remote import RemoteSearchAdapter, require_list
from magnetsearch.core.normalizer import RawRecord, parse_size_label
from magnetsearch.models.query import SearchOptions

NYAA_PAGE_SIZE = 75


class NyaaAdapter(RemoteSearchAdapter):
    """Search adapter for nyaa.si through nyaaapi."""

    default_endpoint = "https://nyaaapi.onrender.com/nyaa"
    paginates_remotely = True
    remote_page_size = NYAA_PAGE_SIZE

    @property
    def id(self) -> str:
        return "nyaa"

    @property
    def name(self) -> str:
        return "Nyaa"

    @property
    def description(self) -> str:
        return "Searches nyaa.si through the nyaaapi.onrender.com API"

    def build_params(self, query: str, options: SearchOptions) -> dict[str, Any]:
        return {"q": query, "page": options.page}

    def extract_documents(self, payload: Any) -> list[dict[str, Any]]:
        return require_list(payload, self.name)

    def map_record(self, raw_record: dict[str, Any]) -> RawRecord | None:
        """Map a Nyaa record; a name plus a hash or magnet is required."""
        name = str(raw_record.get("name") or "").strip()
        info_hash = str(raw_record.get("info_hash") or "").strip()
        magnet = str(raw_record.get("magnet") or "").strip()
        if not name or not (info_hash or magnet):
            return None
        size = raw_record.get("size")

        return RawRecord(
            title=name,
            info_hash=info_hash or None,
            magnet=magnet or None,
            seeders=raw_record.get("seeders"),
            leechers=raw_record.get("leechers"),
            size=size,
            size_label=size if parse_size_label(size) is not None else None,
            uploaded=raw_record.get("date"),
            category=raw_record.get("category"),
        )


class SukebeiAdapter(NyaaAdapter):
    """Search adapter for sukebei.nyaa.si through nyaaapi.

    Sukebei reports sizes only as labels (``"704.9 MiB"``); the label is kept
    verbatim and the byte count is parsed from it.
    """

    default_endpoint = "https://nyaaapi.onrender.com/sukebei"

    @property
    def id(self) -> str:
        return "sukebei"

    @property
    def name(self) -> str:
        return "Sukebei"

    @property
    def description(self) -> str:
        return "Searches sukebei.nyaa.si through the nyaaapi.onrender.com API"

    def extract_documents(self, payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise RemoteShapeError(f"{self.name} returned an unexpected response format (expected a 'data' array)")
        return [record for record in payload["data"] if isinstance(record, dict)]

    def map_record(self, raw_record: dict[str, Any]) -> RawRecord | None:
        """Map a Sukebei record; both a title and a magnet are required."""
        title = str(raw_record.get("title") or "").strip()
        magnet = str(raw_record.get("magnet") or "").strip()
        if not title or not magnet:
            return None

        return RawRecord(
            title=title,
            magnet=magnet,
            seeders=raw_record.get("seeders"),
            leechers=raw_record.get("leechers"),
            size_label=raw_record.get("size"),
            uploaded=raw_record.get("time"),
            category=raw_record.get("category"),
        )
