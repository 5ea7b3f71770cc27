"""Health check endpoints — System and adapter health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from magnetsearch import __version__
from magnetsearch.adapters.base.adapter import AdapterHealth
from magnetsearch.api.deps import get_engine
from magnetsearch.core.engine import MagnetSearchEngine

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="MagnetSearch server version")
    service: str = Field(description="Service name ('magnetsearch')")
    default_adapter: str | None = Field(description="Id of the default search adapter")
    fallback_adapter: str | None = Field(default=None, description="Id of the fallback adapter, if any")
    active_adapters: list[str] = Field(description="List of currently active adapter ids")


class AdapterHealthResponse(BaseModel):
    """Per-adapter health check response.

    Keys are adapter ids, values are ``AdapterHealth`` objects with
    status, latency and optional message.
    """

    adapters: dict[str, AdapterHealth] = Field(description="Map of adapter id to its health status")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
    description="Returns overall system health, server version, and the active adapters with their routing roles.",
)
async def health_check(
    engine: MagnetSearchEngine = Depends(get_engine),
) -> HealthResponse:
    """Basic health check endpoint with adapter info."""
    registry = engine.adapter_registry
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="magnetsearch",
        default_adapter=registry.default_id,
        fallback_adapter=registry.fallback_id,
        active_adapters=registry.active_adapters,
    )


@router.get(
    "/health/adapters",
    response_model=AdapterHealthResponse,
    summary="Adapter Health Check",
    description="Run health checks on every active search adapter and return per-adapter status.",
)
async def adapter_health(
    engine: MagnetSearchEngine = Depends(get_engine),
) -> AdapterHealthResponse:
    """Check health of all search adapters."""
    adapter_statuses = await engine.adapter_registry.health_check_all()
    return AdapterHealthResponse(adapters=adapter_statuses)
