"""Search history endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from magnetsearch.api.deps import get_history
from magnetsearch.history.recorder import HistoryRecorder
from magnetsearch.models.history import HistoryListResponse

router = APIRouter()


@router.get(
    "/history",
    response_model=HistoryListResponse,
    summary="Search History",
    description="Recently served searches, newest first. Empty when history is disabled.",
)
async def list_history(
    history: HistoryRecorder | None = Depends(get_history),
) -> HistoryListResponse:
    if history is None:
        return HistoryListResponse()
    return HistoryListResponse(entries=history.list())
