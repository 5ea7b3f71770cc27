"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from magnetsearch.core.engine import MagnetSearchEngine
from magnetsearch.history.recorder import HistoryRecorder

# Global instances (set during application lifespan)
_engine: MagnetSearchEngine | None = None
_history: HistoryRecorder | None = None


def set_engine(engine: MagnetSearchEngine | None) -> None:
    """Set the global engine instance (called during app lifespan)."""
    global _engine
    _engine = engine


def get_engine() -> MagnetSearchEngine:
    """Get the global MagnetSearch engine instance.

    Raises:
        RuntimeError: If the engine is not initialized.
    """
    if _engine is None:
        raise RuntimeError("MagnetSearch engine not initialized. Is the server running?")
    return _engine


def set_history(history: HistoryRecorder | None) -> None:
    """Set the global history recorder (None disables recording)."""
    global _history
    _history = history


def get_history() -> HistoryRecorder | None:
    """Get the history recorder, or None when history is disabled."""
    return _history
