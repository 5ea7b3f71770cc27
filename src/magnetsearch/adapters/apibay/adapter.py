"""APIBay adapter — The Pirate Bay search via the public apibay.org JSON API.

API reference:
  GET https://apibay.org/q.php?q=<query>&cat=<category>

The response is a JSON array of records whose numeric fields are all
strings::

    {"id": "6913", "name": "Ubuntu 24.04 LTS", "info_hash": "3B245504...",
     "leechers": "3", "seeders": "180", "num_files": "1", "size": "6114656256",
     "username": "...", "added": "1714043417", "status": "vip",
     "category": "303", "imdb": ""}

When nothing matches, apibay answers with a single placeholder record whose
info-hash is all zeros; that record is dropped. apibay returns its complete
result set in one response, so paging is computed locally.
"""

from __future__ import annotations

from typing import Any

from magnetsearch.adapters.base.remote import RemoteSearchAdapter, require_list
from magnetsearch.core.normalizer import RawRecord
from magnetsearch.models.query import SearchOptions

_EMPTY_INFO_HASH = "0" * 40

# Top-level apibay category groups, keyed by the first digit of the code
_CATEGORY_GROUPS = {
    "1": "Audio",
    "2": "Video",
    "3": "Applications",
    "4": "Games",
    "5": "Porn",
    "6": "Other",
}


class ApiBayAdapter(RemoteSearchAdapter):
    """Search adapter for apibay.org."""

    default_endpoint = "https://apibay.org/q.php"

    @property
    def id(self) -> str:
        return "apibay"

    @property
    def name(self) -> str:
        return "The Pirate Bay (apibay.org)"

    @property
    def description(self) -> str:
        return "Searches The Pirate Bay through the public apibay.org API"

    def build_params(self, query: str, options: SearchOptions) -> dict[str, Any]:
        return {"q": query, "cat": "0"}

    def extract_documents(self, payload: Any) -> list[dict[str, Any]]:
        return require_list(payload, self.name)

    def map_record(self, raw_record: dict[str, Any]) -> RawRecord | None:
        """Map an apibay record; records without both name and info-hash are dropped."""
        name = str(raw_record.get("name") or "").strip()
        info_hash = str(raw_record.get("info_hash") or "").strip()
        if not name or not info_hash or info_hash == _EMPTY_INFO_HASH:
            return None

        return RawRecord(
            title=name,
            info_hash=info_hash,
            seeders=raw_record.get("seeders"),
            leechers=raw_record.get("leechers"),
            size=raw_record.get("size"),
            uploaded=raw_record.get("added"),
            category=category_label(raw_record.get("category")),
        )


def category_label(code: Any) -> str | None:
    """Translate an apibay category code (e.g. ``"303"``) to its group label."""
    text = str(code or "").strip()
    if not text or text == "0":
        return None
    if text.isdigit() and len(text) == 3:
        return _CATEGORY_GROUPS.get(text[0], text)
    return text
