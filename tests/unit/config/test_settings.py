"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from magnetsearch.config.settings import (
    BUILTIN_ADAPTERS,
    CONFIG_FILE_ENV,
    DEFAULT_TRACKERS,
    Settings,
    load_settings,
)


class TestDefaults:
    def test_defaults(self, settings: Settings) -> None:
        assert settings.server.port == 3001
        assert settings.search.default_adapter == "apibay"
        assert settings.search.fallback_adapter == "sample"
        assert settings.search.page_size == 10
        assert settings.search.trackers == DEFAULT_TRACKERS
        assert set(settings.search.adapters) == set(BUILTIN_ADAPTERS)
        assert settings.history.limit == 50
        assert settings.history.results_per_entry == 20

    def test_blank_fallback_disables(self) -> None:
        s = Settings(_env_file=None, search={"fallback_adapter": "  "})  # type: ignore[call-arg]
        assert s.search.fallback_adapter is None

    def test_page_size_bounded(self) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, search={"page_size": 0})  # type: ignore[call-arg]


class TestEnvironment:
    def test_nested_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAGNETSEARCH_SERVER__PORT", "9090")
        monkeypatch.setenv("MAGNETSEARCH_SEARCH__DEFAULT_ADAPTER", "nyaa")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.server.port == 9090
        assert s.search.default_adapter == "nyaa"


class TestYaml:
    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "search:\n"
            "  default_adapter: nyaa\n"
            "  page_size: 25\n"
            "  adapters:\n"
            "    apibay:\n"
            "      enabled: false\n"
            "    nyaa:\n"
            "      timeout_ms: 3000\n"
            "      page_size: 50\n"
            "observability:\n"
            "  log_format: console\n",
            encoding="utf-8",
        )

        s = Settings.from_yaml(path)

        assert s.search.default_adapter == "nyaa"
        assert s.search.page_size == 25
        assert s.search.adapters["apibay"].enabled is False
        assert s.search.adapters["nyaa"].timeout_ms == 3000
        assert s.search.adapters["nyaa"].page_size == 50
        assert s.search.adapters["sample"].enabled is True
        assert s.observability.log_format == "console"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Settings.from_yaml(path).server.port == 3001

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "nope.yaml")


class TestLoadSettings:
    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("server:\n  port: 4000\n", encoding="utf-8")
        assert load_settings(path).server.port == 4000

    def test_env_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("server:\n  port: 4001\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
        assert load_settings().server.port == 4001

    def test_explicit_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")

    def test_auto_detected_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "magnetsearch-config.yaml").write_text("server:\n  port: 4002\n", encoding="utf-8")
        assert load_settings().server.port == 4002

    def test_no_file_uses_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
        monkeypatch.chdir(tmp_path)
        assert load_settings().server.port == 3001
