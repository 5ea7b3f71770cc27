"""Tests for the MagnetSearch engine (routing, fallback, pagination)."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import pytest

from magnetsearch.adapters.base.exceptions import RemoteStatusError, RemoteTimeout
from magnetsearch.adapters.base.registry import AdapterRegistry
from magnetsearch.adapters.local.adapter import LocalDatasetAdapter
from magnetsearch.config.settings import Settings
from magnetsearch.core.engine import MagnetSearchEngine
from magnetsearch.core.errors import EmptyQuery, InvalidMagnetURI

# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def make_engine(settings: Settings, build_registry: Callable[..., Any]) -> Callable[..., Any]:
    async def _make(*adapters: Any, default: str | None = None, fallback: str | None = None) -> MagnetSearchEngine:
        registry: AdapterRegistry = await build_registry(*adapters, default=default, fallback=fallback)
        return MagnetSearchEngine(settings, registry)

    return _make


# ── Request validation ───────────────────────────────────────────────────────


class TestEmptyQuery:
    @pytest.mark.parametrize("query", ["", "   ", "\t\n", None])
    async def test_empty_query_raises(self, make_engine, stub_adapter, query: str | None) -> None:
        primary = stub_adapter("primary")
        engine = await make_engine(primary)

        with pytest.raises(EmptyQuery) as exc_info:
            await engine.search(query)

        assert exc_info.value.code == "empty_query"
        assert primary.calls == []


# ── Magnet mode ──────────────────────────────────────────────────────────────


class TestMagnetMode:
    async def test_magnet_short_circuits_adapters(self, make_engine, stub_adapter, ubuntu_magnet) -> None:
        primary = stub_adapter("primary")
        fallback = stub_adapter("fallback")
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        outcome = await engine.search(f"  {ubuntu_magnet}  ")

        assert outcome.mode == "magnet"
        assert outcome.result_count == 1
        assert len(outcome.items) == 1
        assert outcome.items[0].info_hash == "1" * 40
        assert outcome.items[0].title == "ubuntu-24.04"
        assert outcome.fallback_used is False
        assert outcome.adapter_used is None
        assert primary.calls == []
        assert fallback.calls == []

    async def test_magnet_ignores_requested_page(self, make_engine, stub_adapter, ubuntu_magnet) -> None:
        engine = await make_engine(stub_adapter("primary"))
        outcome = await engine.search(ubuntu_magnet, page=4)
        assert outcome.current_page == 1
        assert len(outcome.items) == 1

    async def test_invalid_magnet_raises_without_fallback(self, make_engine, stub_adapter) -> None:
        primary = stub_adapter("primary")
        fallback = stub_adapter("fallback", [{"title": "x", "info_hash": "a" * 40}])
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        with pytest.raises(InvalidMagnetURI):
            await engine.search("magnet:?xt=urn:btih:abc&dn=bad\x01name")

        assert primary.calls == []
        assert fallback.calls == []

    async def test_non_magnet_never_parsed(self, make_engine, stub_adapter, make_docs) -> None:
        engine = await make_engine(stub_adapter("primary", make_docs(1)))
        with patch("magnetsearch.core.engine.parse_magnet") as parser:
            outcome = await engine.search("magnet links explained")
        parser.assert_not_called()
        assert outcome.mode == "search"


# ── Routing ──────────────────────────────────────────────────────────────────


class TestRouting:
    async def test_default_adapter_used(self, make_engine, stub_adapter, make_docs) -> None:
        a = stub_adapter("a", make_docs(1))
        b = stub_adapter("b", make_docs(1))
        engine = await make_engine(a, b, default="b")

        outcome = await engine.search("ubuntu")

        assert outcome.adapter_used == "b"
        assert outcome.adapter_name == "Stub b"
        assert outcome.adapter_endpoint == "https://b.test/search"
        assert a.calls == []
        assert len(b.calls) == 1

    async def test_selected_adapter_used(self, make_engine, stub_adapter, make_docs) -> None:
        a = stub_adapter("a", make_docs(1))
        b = stub_adapter("b", make_docs(1))
        engine = await make_engine(a, b, default="a")

        outcome = await engine.search("ubuntu", adapter_id="b")

        assert outcome.adapter_used == "b"
        assert a.calls == []

    async def test_unknown_adapter_falls_back_to_default(self, make_engine, stub_adapter, make_docs) -> None:
        a = stub_adapter("a", make_docs(1))
        engine = await make_engine(a)

        outcome = await engine.search("ubuntu", adapter_id="does-not-exist")

        assert outcome.adapter_used == "a"
        assert outcome.primary_error is None

    async def test_query_is_trimmed(self, make_engine, stub_adapter, make_docs) -> None:
        a = stub_adapter("a", make_docs(1))
        engine = await make_engine(a)

        outcome = await engine.search("  ubuntu  ")

        assert outcome.query == "ubuntu"
        assert a.calls[0][0] == "ubuntu"


# ── Fallback ─────────────────────────────────────────────────────────────────


class TestFallback:
    async def test_primary_with_results_skips_fallback(self, make_engine, stub_adapter, make_docs) -> None:
        primary = stub_adapter("primary", make_docs(3))
        fallback = stub_adapter("fallback", make_docs(2))
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        outcome = await engine.search("ubuntu")

        assert outcome.fallback_used is False
        assert outcome.result_count == 3
        assert outcome.primary_error is None
        assert outcome.fallback_error is None
        assert outcome.fallback_adapter_id is None
        assert fallback.calls == []

    async def test_empty_primary_uses_fallback(self, make_engine, stub_adapter, make_docs) -> None:
        primary = stub_adapter("primary", [])
        fallback = stub_adapter("fallback", make_docs(4))
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        outcome = await engine.search("ubuntu")

        assert outcome.fallback_used is True
        assert outcome.result_count == 4
        assert outcome.adapter_used == "primary"
        assert outcome.fallback_adapter_id == "fallback"
        assert outcome.fallback_adapter_name == "Stub fallback"
        assert outcome.primary_error is None
        assert all(item.source == "fallback" for item in outcome.items)

    async def test_failed_primary_uses_fallback(self, make_engine, stub_adapter, make_docs) -> None:
        primary = stub_adapter("primary", error=RemoteStatusError(502, "Bad Gateway"))
        fallback = stub_adapter("fallback", make_docs(2))
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        outcome = await engine.search("ubuntu")

        assert outcome.fallback_used is True
        assert outcome.result_count == 2
        assert outcome.primary_error == "Remote service error: HTTP 502 - Bad Gateway"
        assert outcome.fallback_error is None

    async def test_both_fail(self, make_engine, stub_adapter) -> None:
        primary = stub_adapter("primary", error=RemoteTimeout("primary timed out"))
        fallback = stub_adapter("fallback", error=RuntimeError("dataset broken"))
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        outcome = await engine.search("ubuntu")

        assert outcome.items == []
        assert outcome.result_count == 0
        assert outcome.fallback_used is False
        assert outcome.primary_error == "primary timed out"
        assert outcome.fallback_error == "dataset broken"

    async def test_timeout_then_empty_local_fallback(self, make_engine, stub_adapter, local_adapter) -> None:
        primary = stub_adapter("apibay", error=RemoteTimeout("apibay did not respond within 8000 ms"))
        engine = await make_engine(primary, local_adapter, default="apibay", fallback="sample")

        outcome = await engine.search("no such title anywhere")

        assert outcome.result_count == 0
        assert outcome.fallback_used is False
        assert outcome.primary_error is not None
        assert "8000 ms" in outcome.primary_error
        assert outcome.fallback_error is not None
        assert "No results" in outcome.fallback_error

    async def test_fallback_called_once(self, make_engine, stub_adapter) -> None:
        primary = stub_adapter("primary", [])
        fallback = stub_adapter("fallback", [])
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        await engine.search("ubuntu")

        assert len(primary.calls) == 1
        assert len(fallback.calls) == 1

    async def test_primary_is_fallback_not_called_twice(self, make_engine, stub_adapter) -> None:
        primary = stub_adapter("primary", [])
        fallback = stub_adapter("fallback", [])
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        outcome = await engine.search("ubuntu", adapter_id="fallback")

        assert len(fallback.calls) == 1
        assert primary.calls == []
        assert outcome.fallback_used is False
        assert outcome.fallback_adapter_id is None
        assert outcome.fallback_error is not None

    async def test_no_fallback_configured(self, make_engine, stub_adapter) -> None:
        primary = stub_adapter("primary", error=RemoteTimeout("slow"))
        engine = await make_engine(primary)

        outcome = await engine.search("ubuntu")

        assert outcome.primary_error == "slow"
        assert outcome.fallback_error is not None
        assert outcome.result_count == 0

    async def test_cancellation_propagates(self, make_engine, stub_adapter) -> None:
        primary = stub_adapter("primary", error=asyncio.CancelledError())
        fallback = stub_adapter("fallback", [])
        engine = await make_engine(primary, fallback, default="primary", fallback="fallback")

        with pytest.raises(asyncio.CancelledError):
            await engine.search("ubuntu")
        assert fallback.calls == []

    async def test_local_dataset_scenario(self, make_engine, local_adapter: LocalDatasetAdapter) -> None:
        engine = await make_engine(local_adapter)

        outcome = await engine.search("ubuntu")

        assert outcome.result_count == 1
        item = outcome.items[0]
        assert item.title == "Ubuntu 24.04 LTS Desktop"
        assert item.category == "Software"
        assert item.source == "sample"


# ── Pagination ───────────────────────────────────────────────────────────────


class TestEnginePagination:
    async def test_computed_pages(self, make_engine, stub_adapter, make_docs) -> None:
        engine = await make_engine(stub_adapter("a", make_docs(25)))

        outcome = await engine.search("ubuntu", page="3")

        assert outcome.current_page == 3
        assert outcome.page_size == 10
        assert len(outcome.items) == 5
        assert outcome.result_count == 25
        assert outcome.total_pages == 3
        assert outcome.has_prev_page is True
        assert outcome.has_next_page is False

    async def test_invalid_page_served_as_first(self, make_engine, stub_adapter, make_docs) -> None:
        engine = await make_engine(stub_adapter("a", make_docs(25)))

        outcome = await engine.search("ubuntu", page="zero")

        assert outcome.current_page == 1
        assert outcome.has_prev_page is False
        assert outcome.has_next_page is True

    async def test_remote_pages_passed_through(self, make_engine, stub_adapter, make_docs) -> None:
        remote = stub_adapter(
            "nyaa",
            make_docs(75),
            paginates_remotely=True,
            has_more=True,
            remote_page_size=75,
        )
        engine = await make_engine(remote)

        outcome = await engine.search("ubuntu", page=2)

        assert remote.calls[0][1].page == 2
        assert outcome.current_page == 2
        assert outcome.page_size == 75
        assert len(outcome.items) == 75
        assert outcome.total_pages is None
        assert outcome.has_next_page is True
        assert outcome.has_prev_page is True

    async def test_remote_last_page(self, make_engine, stub_adapter, make_docs) -> None:
        remote = stub_adapter("nyaa", make_docs(4), paginates_remotely=True, has_more=False, remote_page_size=75)
        engine = await make_engine(remote)

        outcome = await engine.search("ubuntu")

        assert outcome.total_pages is None
        assert outcome.has_next_page is False

    async def test_configured_page_size(self, stub_adapter, make_docs, build_registry) -> None:
        settings = Settings(_env_file=None, search={"page_size": 2})  # type: ignore[call-arg]
        registry = await build_registry(stub_adapter("a", make_docs(5)))
        engine = MagnetSearchEngine(settings, registry)

        outcome = await engine.search("ubuntu")

        assert len(outcome.items) == 2
        assert outcome.total_pages == 3


# ── Adapter listing ──────────────────────────────────────────────────────────


class TestListAdapters:
    async def test_default_first_with_roles(self, make_engine, stub_adapter) -> None:
        engine = await make_engine(
            stub_adapter("zeta"),
            stub_adapter("alpha"),
            stub_adapter("sample"),
            default="zeta",
            fallback="sample",
        )

        listing = engine.list_adapters()

        assert [a.id for a in listing.adapters] == ["zeta", "alpha", "sample"]
        assert listing.default_adapter_id == "zeta"
        assert listing.fallback_adapter_id == "sample"
        assert listing.adapters[0].is_default is True
        assert listing.adapters[2].is_fallback is True
        assert listing.adapters[1].is_default is False
        assert listing.adapters[1].is_fallback is False

    async def test_shutdown_closes_adapters(self, make_engine, stub_adapter) -> None:
        a = stub_adapter("a")
        engine = await make_engine(a)

        await engine.shutdown()

        assert a.closed is True
        assert engine.adapter_registry.active_adapters == []
