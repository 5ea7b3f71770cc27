"""Local dataset adapter — Substring search over a bundled record collection.

The adapter has no network dependency and never signals an error: an
unreadable dataset is logged and searched as if it were empty. That makes it
the natural fallback for the remote adapters.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from magnetsearch.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from magnetsearch.adapters.local.dataset import DEFAULT_DATASET_PATH, LazyDataset
from magnetsearch.core.normalizer import RawRecord
from magnetsearch.models.query import SearchOptions

logger = logging.getLogger(__name__)

LOCAL_ENDPOINT = "local-data"


class LocalDatasetAdapter(SearchAdapter):
    """Search adapter over a ``LazyDataset``.

    Args:
        dataset: The dataset to search. Takes precedence over ``dataset_path``.
        dataset_path: JSON file to load lazily when no dataset is given.
        trackers: Trackers attached to records that carry none.
        **kwargs: Extra keyword arguments (ignored, for config compat).
    """

    def __init__(
        self,
        dataset: LazyDataset | None = None,
        dataset_path: str | Path | None = None,
        trackers: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self._dataset = dataset or LazyDataset.from_json_file(dataset_path or DEFAULT_DATASET_PATH)
        self._trackers = list(trackers or [])
        self._extra_kwargs = kwargs

    @property
    def id(self) -> str:
        return "sample"

    @property
    def name(self) -> str:
        return "Local sample data"

    @property
    def description(self) -> str:
        return "Matches titles against the bundled sample dataset"

    @property
    def endpoint(self) -> str:
        return LOCAL_ENDPOINT

    @property
    def trackers(self) -> list[str]:
        return list(self._trackers)

    async def initialize(self) -> None:
        """Nothing to connect; the dataset loads on first search."""
        logger.info("Local dataset adapter initialized (lazy)")

    async def shutdown(self) -> None:
        """Nothing to release."""

    async def search(self, query: str, options: SearchOptions) -> RawResults:
        """Return every record whose title (or info-hash) contains *query*, ignoring case."""
        start = time.monotonic()
        try:
            records = await self._records()
        except (OSError, ValueError) as e:
            logger.warning("Local dataset unavailable, searching it as empty: %s", e)
            return RawResults()

        needle = query.strip().lower()
        matches = [
            record
            for record in records
            if needle in str(record.get("title") or "").lower()
            or needle in str(record.get("infoHash") or "").lower()
        ]
        took_ms = int((time.monotonic() - start) * 1000)

        logger.debug("Local search: query=%s, results=%d, took=%dms", query, len(matches), took_ms)
        return RawResults(documents=matches, took_ms=took_ms)

    def map_record(self, raw_record: dict[str, Any]) -> RawRecord | None:
        """Map a dataset record (camelCase keys, as stored in the JSON file)."""
        return RawRecord(
            title=raw_record.get("title"),
            info_hash=raw_record.get("infoHash"),
            magnet=raw_record.get("magnet"),
            seeders=raw_record.get("seeders"),
            leechers=raw_record.get("leechers"),
            size=raw_record.get("size"),
            uploaded=raw_record.get("uploaded"),
            category=raw_record.get("category"),
            trackers=raw_record.get("trackers"),
        )

    async def health_check(self) -> AdapterHealth:
        """Report whether the dataset can be loaded."""
        try:
            records = await self._records()
        except (OSError, ValueError) as e:
            return AdapterHealth(status="unhealthy", message=str(e))
        return AdapterHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message=f"{len(records)} records",
        )

    async def _records(self) -> tuple[dict[str, Any], ...]:
        if self._dataset.loaded:
            return self._dataset.get()
        # First load reads from disk; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._dataset.get)
