"""Pytest configuration and fixtures for Traquila tests."""

from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from traquila.dependencies import get_session, get_store, reset_dependencies
from traquila.models import Bottle, TastingRecord
from traquila.services.dashboard import DashboardSession
from traquila.services.journal import JournalStore

# Reference time shared by the store, the ledger and the dashboard session
NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock so timestamps and time ranges are predictable."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> JournalStore:
    """Empty journal store driven by the fake clock."""
    return JournalStore(clock=clock)


@pytest.fixture
def session(store: JournalStore, clock: FakeClock) -> DashboardSession:
    return DashboardSession(store, clock=clock)


@pytest.fixture
def make_bottle() -> Callable[..., Bottle]:
    """Factory for bottles with sensible defaults."""

    def _make(name: str = "Test Blanco", **fields: Any) -> Bottle:
        fields.setdefault("created_at", NOW)
        fields.setdefault("updated_at", NOW)
        return Bottle(name=name, **fields)

    return _make


@pytest.fixture
def make_record() -> Callable[..., TastingRecord]:
    """Factory for tasting records; ``days_ago`` is relative to NOW."""

    def _make(bottle: Bottle, amount_oz: float = 1.5, days_ago: float = 1, **fields: Any) -> TastingRecord:
        fields.setdefault("date", NOW - timedelta(days=days_ago))
        fields.setdefault("created_at", fields["date"])
        return TastingRecord(bottle_id=bottle.id, amount_oz=amount_oz, **fields)

    return _make


@pytest_asyncio.fixture(scope="function")
async def client(store: JournalStore, session: DashboardSession) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with the store and session overridden."""
    from traquila.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_session] = lambda: session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    reset_dependencies()


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Minimal valid PNG (1x1 pixel)."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53, 0xDE,
        0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41, 0x54,
        0x08, 0xD7, 0x63, 0xF8, 0xFF, 0xFF, 0x3F, 0x00,
        0x05, 0xFE, 0x02, 0xFE, 0xA3, 0x1A, 0x8D, 0xEB,
        0x00, 0x00, 0x00, 0x00, 0x49, 0x45, 0x4E, 0x44,
        0xAE, 0x42, 0x60, 0x82,
    ])
