"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (MAGNETSEARCH_ prefix) and ``.env``
  3. Default values
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_FILE = "magnetsearch-config.yaml"
CONFIG_FILE_ENV = "MAGNETSEARCH_CONFIG_FILE"

DEFAULT_TRACKERS = [
    "udp://tracker.opentrackr.org:1337/announce",
    "udp://open.stealth.si:80/announce",
    "udp://tracker.tiny-vps.com:6969/announce",
]

BUILTIN_ADAPTERS = ("apibay", "nyaa", "sukebei", "sample")


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=3001, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class AdapterConfig(BaseModel):
    """Configuration for a single search adapter."""

    enabled: bool = Field(default=True, description="Whether this adapter is active")
    endpoint: str | None = Field(default=None, description="Override for the adapter's endpoint URL")
    api_key: str | None = Field(default=None, description="Bearer token sent to the endpoint")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    timeout_ms: int | None = Field(default=None, ge=1, description="Per-call timeout; defaults to search.timeout_ms")
    page_size: int | None = Field(default=None, ge=1, description="Remote page size, for remotely paged sources")
    extra: dict[str, Any] = Field(default_factory=dict, description="Adapter-specific options")


class SearchSettings(BaseModel):
    """Search routing and paging configuration."""

    default_adapter: str = Field(default="apibay", description="Adapter used when a request names none")
    fallback_adapter: str | None = Field(
        default="sample",
        description="Adapter tried once when the primary fails or returns nothing",
    )
    page_size: int = Field(default=10, ge=1, le=100, description="Results per page")
    timeout_ms: int = Field(default=8000, ge=1, description="Default per-call timeout for remote adapters")
    trackers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TRACKERS),
        description="Trackers attached to magnets built from a bare info-hash",
    )
    adapters: dict[str, AdapterConfig] = Field(default_factory=dict, description="Adapter configurations")

    @field_validator("fallback_adapter", mode="before")
    @classmethod
    def _blank_fallback(cls, v: Any) -> Any:
        """An empty string (e.g. from an env var) disables the fallback."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _fill_builtin_adapters(self) -> SearchSettings:
        for name in BUILTIN_ADAPTERS:
            self.adapters.setdefault(name, AdapterConfig())
        return self


class DatasetSettings(BaseModel):
    """Local dataset configuration."""

    path: str | None = Field(default=None, description="JSON dataset file; the bundled sample when unset")


class HistorySettings(BaseModel):
    """Search history configuration."""

    enabled: bool = Field(default=True, description="Whether served searches are recorded")
    limit: int = Field(default=50, ge=1, description="Maximum number of entries kept")
    results_per_entry: int = Field(default=20, ge=1, description="Maximum results kept per entry")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: Literal["json", "console"] = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the MAGNETSEARCH_
    prefix. Nested settings use double underscores.

    Example:
        MAGNETSEARCH_SERVER__PORT=9090
        MAGNETSEARCH_SEARCH__DEFAULT_ADAPTER=nyaa
        MAGNETSEARCH_SEARCH__FALLBACK_ADAPTER=sample
        MAGNETSEARCH_SEARCH__ADAPTERS__APIBAY__ENDPOINT=https://apibay.example/q.php
    """

    model_config = {
        "env_prefix": "MAGNETSEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    # Application metadata
    app_name: str = Field(default="MagnetSearch", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # Component settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from *path*, ``$MAGNETSEARCH_CONFIG_FILE``, or an auto-detected config file.

    Falls back to environment variables and defaults when no file is found.

    Raises:
        FileNotFoundError: If an explicitly named file does not exist.
    """
    explicit = path or os.environ.get(CONFIG_FILE_ENV)
    if explicit:
        return Settings.from_yaml(explicit)

    default_path = Path(DEFAULT_CONFIG_FILE)
    if default_path.exists():
        return Settings.from_yaml(default_path)
    return Settings()
