"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from magnetsearch.adapters.base.adapter import AdapterHealth, RawResults, SearchAdapter
from magnetsearch.adapters.base.registry import AdapterRegistry
from magnetsearch.adapters.local.adapter import LocalDatasetAdapter
from magnetsearch.adapters.local.dataset import LazyDataset
from magnetsearch.config.settings import Settings
from magnetsearch.core.normalizer import RawRecord
from magnetsearch.models.query import SearchOptions

UBUNTU_MAGNET = (
    "magnet:?xt=urn:btih:1111111111111111111111111111111111111111"
    "&dn=ubuntu-24.04&tr=udp%3A%2F%2Ftracker.example.org%3A6969"
)


class StubAdapter(SearchAdapter):
    """In-memory adapter whose answer is scripted by the test.

    ``documents`` are ``RawRecord``-shaped dicts; ``error`` is raised instead
    of answering when set. Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        adapter_id: str,
        documents: list[dict[str, Any]] | None = None,
        *,
        error: Exception | None = None,
        paginates_remotely: bool = False,
        has_more: bool | None = None,
        remote_page_size: int = 0,
    ) -> None:
        self._id = adapter_id
        self.documents = documents or []
        self.error = error
        self.paginates_remotely = paginates_remotely
        self.remote_page_size = remote_page_size
        self._has_more = has_more
        self.calls: list[tuple[str, SearchOptions]] = []
        self.initialized = False
        self.closed = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return f"Stub {self._id}"

    @property
    def description(self) -> str:
        return f"Scripted {self._id} adapter"

    @property
    def endpoint(self) -> str:
        return f"https://{self._id}.test/search"

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.closed = True

    async def search(self, query: str, options: SearchOptions) -> RawResults:
        self.calls.append((query, options))
        if self.error is not None:
            raise self.error
        return RawResults(documents=list(self.documents), has_more=self._has_more)

    def map_record(self, raw_record: dict[str, Any]) -> RawRecord | None:
        return RawRecord(**raw_record)  # type: ignore[typeddict-item]

    async def health_check(self) -> AdapterHealth:
        return AdapterHealth(status="healthy")


def _make_docs(count: int, prefix: str = "Result") -> list[dict[str, Any]]:
    """Build *count* distinct raw records with 40-char info-hashes."""
    return [
        {
            "title": f"{prefix} {i}",
            "info_hash": f"{i:040x}",
            "seeders": 10 * i,
            "leechers": i,
            "size": 1024 * 1024 * (i + 1),
            "category": "Video",
        }
        for i in range(1, count + 1)
    ]


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
    )


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """Raw dataset records in the on-disk (camelCase) shape."""
    return [
        {
            "title": "Ubuntu 24.04 LTS Desktop",
            "size": 5368709120,
            "seeders": 350,
            "leechers": 24,
            "magnet": UBUNTU_MAGNET,
            "uploaded": "2023-06-17T10:15:00.000Z",
            "infoHash": "1111111111111111111111111111111111111111",
            "category": "Software",
        },
        {
            "title": "Creative Commons Nature Documentary Collection",
            "size": 2147483648,
            "seeders": 120,
            "leechers": 8,
            "magnet": "magnet:?xt=urn:btih:2222222222222222222222222222222222222222&dn=cc-nature-doc",
            "uploaded": "2023-08-05T08:00:00.000Z",
            "infoHash": "2222222222222222222222222222222222222222",
            "category": "Video",
        },
        {
            "title": "Educational Video Collection",
            "size": 4294967296,
            "seeders": 156,
            "leechers": 23,
            "magnet": "magnet:?xt=urn:btih:5555555555555555555555555555555555555555&dn=educational-videos",
            "uploaded": "2023-03-22T14:45:00.000Z",
            "infoHash": "5555555555555555555555555555555555555555",
            "category": "Video",
        },
    ]


@pytest.fixture
def local_adapter(sample_records: list[dict[str, Any]]) -> LocalDatasetAdapter:
    return LocalDatasetAdapter(dataset=LazyDataset.from_records(sample_records))


@pytest.fixture
def make_docs() -> Callable[..., list[dict[str, Any]]]:
    """Factory for distinct raw records."""
    return _make_docs


@pytest.fixture
def ubuntu_magnet() -> str:
    return UBUNTU_MAGNET


@pytest.fixture
def stub_adapter() -> Callable[..., StubAdapter]:
    """Factory for scripted adapters."""
    return StubAdapter


@pytest.fixture
def build_registry() -> Callable[..., Any]:
    """Factory building a configured registry from adapter instances."""

    async def _build(
        *adapters: SearchAdapter,
        default: str | None = None,
        fallback: str | None = None,
    ) -> AdapterRegistry:
        registry = AdapterRegistry()
        for adapter in adapters:
            await registry.add(adapter)
        registry.configure(default_id=default, fallback_id=fallback)
        return registry

    return _build
