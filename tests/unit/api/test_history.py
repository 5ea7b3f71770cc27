"""Tests for the search history endpoint."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from magnetsearch.api.app import create_app
from magnetsearch.api.deps import set_engine, set_history
from magnetsearch.config.settings import Settings
from magnetsearch.core.engine import MagnetSearchEngine
from magnetsearch.history.recorder import InMemoryHistory


@pytest.fixture
async def engine(settings: Settings, local_adapter) -> MagnetSearchEngine:
    engine = MagnetSearchEngine(settings)
    await engine.adapter_registry.add(local_adapter)
    engine.adapter_registry.configure()
    return engine


@pytest.fixture
def client(settings: Settings, engine: MagnetSearchEngine) -> TestClient:
    app = create_app(settings)
    set_engine(engine)
    yield TestClient(app)
    set_engine(None)
    set_history(None)


class TestHistoryEndpoint:
    def test_newest_first(self, client: TestClient) -> None:
        set_history(InMemoryHistory())
        client.get("/v1/search", params={"q": "ubuntu"})
        client.get("/v1/search", params={"q": "collection"})

        entries = client.get("/v1/history").json()["entries"]

        assert [e["query"] for e in entries] == ["collection", "ubuntu"]
        assert entries[0]["result_count"] == 2
        assert entries[1]["results"][0]["title"] == "Ubuntu 24.04 LTS Desktop"
        assert entries[1]["adapter_used"] == "sample"

    def test_bounded(self, client: TestClient) -> None:
        set_history(InMemoryHistory(limit=2))
        for query in ("one", "two", "three"):
            client.get("/v1/search", params={"q": query})

        entries = client.get("/v1/history").json()["entries"]

        assert [e["query"] for e in entries] == ["three", "two"]

    def test_disabled_history_is_empty(self, client: TestClient) -> None:
        set_history(None)
        client.get("/v1/search", params={"q": "ubuntu"})

        response = client.get("/v1/history")

        assert response.status_code == 200
        assert response.json() == {"entries": []}
