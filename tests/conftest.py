# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import os

# Must be set before tutorescrow.core.db builds its engine
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("SENTRY_DSN", None)
os.environ.pop("MAX_ESCROW", None)

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tutorescrow.api.tutoring_session_helpers import get_clock, get_escrow_settings  # noqa: E402
from tutorescrow.core.config import EscrowSettings  # noqa: E402
from tutorescrow.core.db import Base, get_db  # noqa: E402
from tutorescrow.main import create_app  # noqa: E402

# Import all models
from tutorescrow.models.payout import Payout  # noqa: E402, F401
from tutorescrow.models.session_audit_log import SessionAuditLog  # noqa: E402, F401
from tutorescrow.models.tutoring_session import TutoringSession  # noqa: E402, F401

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

class FrozenClock:
    """Settable time source for deadline checks."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 3, 2, 12, 0))


@pytest.fixture
def escrow_settings() -> EscrowSettings:
    return EscrowSettings()


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create fresh in-memory DB session for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def app(db_session: AsyncSession, clock: FrozenClock, escrow_settings: EscrowSettings):
    """Application with DB, clock and escrow settings overridden."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_escrow_settings] = lambda: escrow_settings
    return app


@pytest_asyncio.fixture
async def client(app):
    """Create async test client. Pass caller(...) headers per request."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
