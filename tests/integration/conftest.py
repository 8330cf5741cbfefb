import os
import uuid
from collections.abc import AsyncGenerator

import psycopg
import pytest
import pytest_asyncio

from portfolio_review.config.settings import Settings
from portfolio_review.database.connection import build_conninfo
from portfolio_review.database.repositories.session_repository import PostgresSessionStore


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "portfolio_review_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def postgres_available(test_settings: Settings) -> None:
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=3):
            pass
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a scratch database"
        )


@pytest_asyncio.fixture
async def pg_store(
    postgres_available: None,
    test_settings: Settings,
) -> AsyncGenerator[PostgresSessionStore, None]:
    store = await PostgresSessionStore.connect(test_settings)
    try:
        yield store
    finally:
        await store.close()


@pytest_asyncio.fixture
async def session_id(pg_store: PostgresSessionStore) -> AsyncGenerator[str, None]:
    """A fresh session id whose row is removed after the test."""
    sid = f"it-{uuid.uuid4()}"
    yield sid
    async with pg_store._pool.connection() as conn:
        await conn.execute("DELETE FROM analysis_sessions WHERE id = %s", (sid,))
        await conn.commit()
