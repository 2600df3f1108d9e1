"""FastAPI dependencies providing the journal store and dashboard session."""

from typing import Annotated

from fastapi import Depends

from traquila.config import get_settings
from traquila.services.dashboard import DashboardSession
from traquila.services.journal import JournalStore

_store: JournalStore | None = None
_session: DashboardSession | None = None


def get_store() -> JournalStore:
    """Process-wide journal store, created on first use."""
    global _store
    if _store is None:
        settings = get_settings()
        _store = JournalStore(
            max_photos_per_bottle=settings.max_photos_per_bottle,
            default_bottle_size_ml=settings.default_bottle_size_ml,
        )
    return _store


def get_session(store: Annotated[JournalStore, Depends(get_store)]) -> DashboardSession:
    """Dashboard session bound to the current store.

    A new session is created when the store changes (e.g. a test override).
    """
    global _session
    if _session is None or _session.store is not store:
        settings = get_settings()
        _session = DashboardSession(
            store,
            pipeline_options={
                "top_limit": settings.top_limit,
                "preview_length": settings.note_preview_length,
                "trend_min_rated": settings.trend_min_rated,
                "keyword_limit": settings.keyword_limit,
            },
        )
    return _session


def reset_dependencies() -> None:
    """Drop the cached store and session."""
    global _store, _session
    _store = None
    _session = None


Store = Annotated[JournalStore, Depends(get_store)]
Session = Annotated[DashboardSession, Depends(get_session)]
