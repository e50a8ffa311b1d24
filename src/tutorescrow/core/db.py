"""Async engine, session factory and the per-request session dependency."""

import os
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

LOCAL_DATABASE_URL = (
    "postgresql+asyncpg://tutorescrow:dev_password_change_in_prod@db:5432/tutorescrow_dev"
)

ASYNC_POSTGRES_SCHEME = "postgresql+asyncpg://"


def resolve_database_url(raw: str | None) -> str:
    """Normalize DATABASE_URL for the async engine.

    Hosting providers hand out ``postgres://`` or ``postgresql://``; both are
    rewritten to the asyncpg driver. Any other URL (e.g. sqlite+aiosqlite in
    tests) is used as given, and an empty value means the local dev database.
    """
    raw = (raw or "").strip()
    if not raw:
        return LOCAL_DATABASE_URL

    for scheme in ("postgres://", "postgresql://"):
        if raw.startswith(scheme):
            return ASYNC_POSTGRES_SCHEME + raw[len(scheme):]
    return raw


def engine_options(url: str) -> dict[str, Any]:
    if url.startswith(ASYNC_POSTGRES_SCHEME):
        # Drop pooled connections the server closed while idle
        return {"pool_pre_ping": True}
    return {}


DATABASE_URL = resolve_database_url(os.getenv("DATABASE_URL"))

engine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session and one transaction per request.

    Commits when the route returns and rolls back when it raises, so a session
    change, its payout row and its audit row land together or not at all.
    """
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
