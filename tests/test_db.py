# File: tests/test_db.py
"""Tests for database URL handling."""

import pytest

from tutorescrow.core.db import (
    LOCAL_DATABASE_URL,
    engine_options,
    resolve_database_url,
)


class TestResolveDatabaseUrl:
    """Test DATABASE_URL normalization."""

    @pytest.mark.parametrize(
        "raw",
        [
            "postgres://user:pw@host:5432/app",
            "postgresql://user:pw@host:5432/app",
            "postgresql+asyncpg://user:pw@host:5432/app",
        ],
    )
    def test_postgres_urls_use_asyncpg(self, raw):
        assert resolve_database_url(raw) == "postgresql+asyncpg://user:pw@host:5432/app"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_unset_means_local_database(self, raw):
        assert resolve_database_url(raw) == LOCAL_DATABASE_URL

    def test_other_drivers_untouched(self):
        assert resolve_database_url(" sqlite+aiosqlite:///:memory: ") == "sqlite+aiosqlite:///:memory:"


class TestEngineOptions:
    """Test per-driver engine keyword arguments."""

    def test_postgres_pings_pooled_connections(self):
        assert engine_options("postgresql+asyncpg://host/app") == {"pool_pre_ping": True}

    def test_sqlite_has_no_extra_options(self):
        assert engine_options("sqlite+aiosqlite:///:memory:") == {}
