"""Search history recording."""

from magnetsearch.history.recorder import HistoryRecorder, InMemoryHistory

__all__ = ["HistoryRecorder", "InMemoryHistory"]
