"""API v1 Router — Search, adapter listing, history, and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from magnetsearch.api.v1.endpoints.adapters import router as adapters_router
from magnetsearch.api.v1.endpoints.health import router as health_router
from magnetsearch.api.v1.endpoints.history import router as history_router
from magnetsearch.api.v1.endpoints.search import router as search_router

router = APIRouter(tags=["v1"])
router.include_router(search_router)
router.include_router(adapters_router)
router.include_router(history_router)
router.include_router(health_router)
