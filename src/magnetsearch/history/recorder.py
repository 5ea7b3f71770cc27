"""Search history — Bounded, newest-first record of served searches.

The engine never depends on the recorder; the API layer hands each outcome
to it after the response is sent, and recorder failures are only logged.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from magnetsearch.models.history import HistoryEntry
from magnetsearch.models.response import SearchOutcome

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_RESULTS_PER_ENTRY = 20


@runtime_checkable
class HistoryRecorder(Protocol):
    """Anything that can keep and list past searches."""

    def record(self, outcome: SearchOutcome) -> None: ...

    def list(self) -> list[HistoryEntry]: ...


class InMemoryHistory:
    """Thread-safe in-process history store.

    Args:
        limit: Maximum number of entries kept; the oldest are evicted first.
        results_per_entry: Maximum number of results copied onto each entry.
    """

    def __init__(
        self,
        limit: int = DEFAULT_HISTORY_LIMIT,
        results_per_entry: int = DEFAULT_RESULTS_PER_ENTRY,
    ) -> None:
        self._limit = limit if limit > 0 else DEFAULT_HISTORY_LIMIT
        self._results_per_entry = results_per_entry if results_per_entry > 0 else DEFAULT_RESULTS_PER_ENTRY
        self._lock = threading.Lock()
        self._entries: list[HistoryEntry] = []

    def record(self, outcome: SearchOutcome) -> None:
        """Store *outcome* as the newest entry."""
        results = [item.model_copy(deep=True) for item in outcome.items[: self._results_per_entry]]
        entry = HistoryEntry(
            id=uuid.uuid4().hex[:16],
            query=outcome.query,
            created_at=datetime.now(UTC),
            mode=outcome.mode,
            adapter_used=outcome.adapter_used,
            fallback_used=outcome.fallback_used,
            result_count=len(results),
            results=results,
        )
        with self._lock:
            self._entries.insert(0, entry)
            del self._entries[self._limit :]
        logger.debug("Recorded search history entry %s for query: %s", entry.id, outcome.query)

    def list(self) -> list[HistoryEntry]:
        """Return copies of the entries, newest first."""
        with self._lock:
            return [entry.model_copy(deep=True) for entry in self._entries]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
