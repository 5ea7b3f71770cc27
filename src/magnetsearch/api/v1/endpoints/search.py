"""Search endpoint — Keyword search with adapter fallback, or direct magnet lookup."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from magnetsearch.api.deps import get_engine, get_history
from magnetsearch.core.engine import MagnetSearchEngine
from magnetsearch.core.errors import SearchRequestError
from magnetsearch.history.recorder import HistoryRecorder
from magnetsearch.models.response import ErrorDetail, ErrorResponse, SearchOutcome

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/search",
    response_model=SearchOutcome,
    summary="Search Magnet Links",
    description=(
        "Search the requested adapter (or the default one) for magnet links. "
        "When it fails or finds nothing, the configured fallback adapter is tried once.\n\n"
        "A query that starts with `magnet:?` is parsed directly and returned as a "
        "single result without contacting any adapter.\n\n"
        "`page` is 1-based; anything that is not an integer ≥ 1 is served as page 1."
    ),
    responses={
        400: {
            "model": ErrorResponse,
            "description": "Empty query (`empty_query`) or malformed magnet link (`invalid_magnet_uri`)",
        },
        500: {"description": "Internal server error — search processing failed"},
    },
)
async def search(
    background_tasks: BackgroundTasks,
    q: str | None = Query(default=None, description="Keywords or a magnet URI"),
    adapter: str | None = Query(default=None, description="Adapter id to query first"),
    page: str | None = Query(default=None, description="Requested page (1-based)"),
    engine: MagnetSearchEngine = Depends(get_engine),
    history: HistoryRecorder | None = Depends(get_history),
) -> SearchOutcome:
    """Execute a search and schedule it for the history log."""
    try:
        outcome = await engine.search(q, adapter_id=adapter, page=page)
    except SearchRequestError as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code=e.code, message=str(e)).model_dump(),
        ) from e
    except Exception as e:
        logger.error("Search failed: %s", e, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Search processing failed: {e!s}",
        ) from e

    if history is not None:
        background_tasks.add_task(_record_history, history, outcome)
    return outcome


def _record_history(history: HistoryRecorder, outcome: SearchOutcome) -> None:
    try:
        history.record(outcome)
    except Exception:
        logger.warning("Failed to record search history for query: %s", outcome.query, exc_info=True)
