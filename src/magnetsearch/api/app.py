"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import importlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from magnetsearch import __version__
from magnetsearch.api.deps import set_engine, set_history
from magnetsearch.api.v1.router import router as v1_router
from magnetsearch.config.settings import AdapterConfig, Settings, load_settings
from magnetsearch.core.engine import MagnetSearchEngine
from magnetsearch.history.recorder import InMemoryHistory
from magnetsearch.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # $MAGNETSEARCH_CONFIG_FILE, else magnetsearch-config.yaml if present
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        setup_logging(settings.observability)
        logger.info("Starting MagnetSearch v%s", __version__)

        engine = MagnetSearchEngine(settings)

        # Auto-register adapters from configuration
        await _register_adapters(engine, settings)
        _configure_routing(engine, settings)
        await engine.initialize()

        history = (
            InMemoryHistory(limit=settings.history.limit, results_per_entry=settings.history.results_per_entry)
            if settings.history.enabled
            else None
        )

        set_engine(engine)
        set_history(history)

        # Store settings in app state
        app.state.settings = settings
        app.state.engine = engine
        app.state.history = history

        logger.info("MagnetSearch is ready to serve requests on port %d", settings.server.port)
        yield

        # Shutdown
        logger.info("Shutting down MagnetSearch...")
        await engine.shutdown()
        set_engine(None)
        set_history(None)
        logger.info("MagnetSearch shutdown complete")

    app = FastAPI(
        title="MagnetSearch",
        description=(
            "Magnet link search across public torrent indexes, with a local "
            "fallback dataset and direct magnet URI lookup."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routers
    app.include_router(v1_router, prefix="/v1")

    return app


# ── Adapter auto-registration ──

# Maps adapter ids to (module_path, class_name) for lazy import
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "apibay": ("magnetsearch.adapters.apibay.adapter", "ApiBayAdapter"),
    "nyaa": ("magnetsearch.adapters.nyaa.adapter", "NyaaAdapter"),
    "sukebei": ("magnetsearch.adapters.nyaa.adapter", "SukebeiAdapter"),
    "sample": ("magnetsearch.adapters.local.adapter", "LocalDatasetAdapter"),
}

_LOCAL_ADAPTERS = {"sample"}


def _adapter_kwargs(adapter_name: str, adapter_cfg: AdapterConfig, settings: Settings) -> dict[str, Any]:
    """Build constructor kwargs for one adapter from its config."""
    kwargs: dict[str, Any] = {"trackers": list(settings.search.trackers)}

    if adapter_name in _LOCAL_ADAPTERS:
        if settings.dataset.path:
            kwargs["dataset_path"] = settings.dataset.path
    else:
        kwargs["timeout_ms"] = adapter_cfg.timeout_ms or settings.search.timeout_ms
        if adapter_cfg.endpoint:
            kwargs["endpoint"] = adapter_cfg.endpoint
        if adapter_cfg.api_key:
            kwargs["api_key"] = adapter_cfg.api_key
        if adapter_cfg.headers:
            kwargs["headers"] = dict(adapter_cfg.headers)
        if adapter_cfg.page_size:
            kwargs["page_size"] = adapter_cfg.page_size

    # Pass through any extra config
    kwargs.update(adapter_cfg.extra)
    return kwargs


async def _register_adapters(engine: MagnetSearchEngine, settings: Settings) -> None:
    """Register and initialise adapters declared in settings.

    For each adapter entry in ``settings.search.adapters`` that is enabled,
    the corresponding adapter class is imported, registered, and initialised.
    """
    for adapter_name, adapter_cfg in settings.search.adapters.items():
        if not adapter_cfg.enabled:
            logger.info("Adapter '%s' is disabled, skipping", adapter_name)
            continue

        entry = _ADAPTER_MAP.get(adapter_name)
        if entry is None:
            logger.warning(
                "Unknown adapter '%s': no built-in class found. "
                "Register it manually via engine.adapter_registry.register().",
                adapter_name,
            )
            continue

        module_path, class_name = entry
        try:
            module = importlib.import_module(module_path)
            adapter_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            logger.warning("Failed to import adapter '%s': %s", adapter_name, e)
            continue

        engine.adapter_registry.register(adapter_name, adapter_class)
        try:
            await engine.adapter_registry.initialize_adapter(
                adapter_name, **_adapter_kwargs(adapter_name, adapter_cfg, settings)
            )
            logger.info("Adapter '%s' registered and initialised", adapter_name)
        except Exception:
            logger.warning("Failed to initialise adapter '%s'", adapter_name, exc_info=True)


def _configure_routing(engine: MagnetSearchEngine, settings: Settings) -> None:
    """Assign default and fallback roles, tolerating adapters that failed to start."""
    registry = engine.adapter_registry
    active = set(registry.active_adapters)

    default_id: str | None = settings.search.default_adapter
    if default_id not in active:
        logger.warning("Default adapter '%s' is not active; using the first active adapter", default_id)
        default_id = None

    fallback_id = settings.search.fallback_adapter
    if fallback_id and fallback_id not in active:
        logger.warning("Fallback adapter '%s' is not active; searches will run without a fallback", fallback_id)
        fallback_id = None

    registry.configure(default_id=default_id, fallback_id=fallback_id)
