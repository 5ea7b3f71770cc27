"""Data models shared by adapters, the engine and the API."""

from magnetsearch.models.adapter import AdapterInfo, AdapterListResponse, AdapterRole
from magnetsearch.models.descriptor import ResourceDescriptor
from magnetsearch.models.history import HistoryEntry, HistoryListResponse
from magnetsearch.models.query import SearchOptions
from magnetsearch.models.response import ErrorDetail, ErrorResponse, PageView, SearchOutcome

__all__ = [
    "AdapterInfo",
    "AdapterListResponse",
    "AdapterRole",
    "ErrorDetail",
    "ErrorResponse",
    "HistoryEntry",
    "HistoryListResponse",
    "PageView",
    "ResourceDescriptor",
    "SearchOptions",
    "SearchOutcome",
]
