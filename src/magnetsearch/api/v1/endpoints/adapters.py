"""Adapter listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from magnetsearch.api.deps import get_engine
from magnetsearch.core.engine import MagnetSearchEngine
from magnetsearch.models.adapter import AdapterListResponse

router = APIRouter()


@router.get(
    "/adapters",
    response_model=AdapterListResponse,
    summary="List Adapters",
    description="List the configured search adapters, default first, with their routing roles.",
)
async def list_adapters(
    engine: MagnetSearchEngine = Depends(get_engine),
) -> AdapterListResponse:
    return engine.list_adapters()
