"""Lazily loaded, read-only record collection for the local dataset adapter."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_DATASET_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "sample_results.json"


class LazyDataset:
    """A record collection loaded on first use and cached for the process lifetime.

    Loading is guarded by a lock so concurrent first reads converge on a
    single cached value. A failed load is not cached; the next read retries.

    Args:
        loader: Callable returning the raw records (a list of dicts).
        name: Label used in log messages.
    """

    def __init__(self, loader: Callable[[], Any], *, name: str = "dataset") -> None:
        self._loader = loader
        self._name = name
        self._lock = threading.Lock()
        self._records: tuple[dict[str, Any], ...] | None = None

    @classmethod
    def from_json_file(cls, path: str | Path) -> LazyDataset:
        """Create a dataset backed by a JSON array file."""
        dataset_path = Path(path)

        def _load() -> Any:
            with open(dataset_path, encoding="utf-8") as f:
                return json.load(f)

        return cls(_load, name=str(dataset_path))

    @classmethod
    def from_records(cls, records: Sequence[dict[str, Any]]) -> LazyDataset:
        """Create a dataset from records already in memory."""
        return cls(lambda: list(records), name="in-memory")

    @property
    def loaded(self) -> bool:
        return self._records is not None

    def get(self) -> tuple[dict[str, Any], ...]:
        """Return the records, loading them on first call.

        Raises:
            OSError: If the backing file cannot be read.
            ValueError: If the content is not a JSON array of records.
        """
        records = self._records
        if records is not None:
            return records

        with self._lock:
            if self._records is None:
                raw = self._loader()
                if not isinstance(raw, list):
                    raise ValueError(f"Dataset {self._name} must be a JSON array of records")
                self._records = tuple(record for record in raw if isinstance(record, dict))
                logger.info("Loaded %d records from %s", len(self._records), self._name)
            return self._records
