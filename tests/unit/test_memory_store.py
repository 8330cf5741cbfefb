import pytest

from portfolio_review.insights.models import Insight
from portfolio_review.sessions.exceptions import (
    DuplicateSessionError,
    SessionNotFoundError,
    SessionStateError,
)
from portfolio_review.sessions.memory_store import InMemorySessionStore
from portfolio_review.sessions.models import SessionStage, SessionStatus


@pytest.mark.asyncio
class TestCreate:
    async def test_creates_pending_session(self, memory_store: InMemorySessionStore) -> None:
        session = await memory_store.create("s1", "uploads/s1.pdf")
        assert session.status is SessionStatus.PENDING
        assert session.progress == 0
        assert session.stage is None
        assert session.created_at == session.updated_at

    async def test_duplicate_id_raises(self, memory_store: InMemorySessionStore) -> None:
        await memory_store.create("s1", "uploads/s1.pdf")
        with pytest.raises(DuplicateSessionError):
            await memory_store.create("s1", "uploads/other.pdf")

    async def test_get_returns_created(self, memory_store: InMemorySessionStore) -> None:
        created = await memory_store.create("s1", "uploads/s1.pdf")
        assert await memory_store.get("s1") == created

    async def test_get_unknown_returns_none(self, memory_store: InMemorySessionStore) -> None:
        assert await memory_store.get("missing") is None


@pytest.mark.asyncio
class TestUpdate:
    async def test_applies_fields(self, memory_store: InMemorySessionStore) -> None:
        created = await memory_store.create("s1", "uploads/s1.pdf")
        updated = await memory_store.update(
            "s1",
            status=SessionStatus.PROCESSING,
            stage=SessionStage.PARSING,
            progress=10,
        )
        assert updated.status is SessionStatus.PROCESSING
        assert updated.stage is SessionStage.PARSING
        assert updated.updated_at >= created.updated_at
        assert await memory_store.get("s1") == updated

    async def test_unknown_session_raises(self, memory_store: InMemorySessionStore) -> None:
        with pytest.raises(SessionNotFoundError):
            await memory_store.update("missing", progress=5)

    async def test_expected_status_mismatch(self, memory_store: InMemorySessionStore) -> None:
        await memory_store.create("s1", "uploads/s1.pdf")
        with pytest.raises(SessionStateError, match="expected processing"):
            await memory_store.update(
                "s1",
                expected_status=SessionStatus.PROCESSING,
                status=SessionStatus.FAILED,
                error="boom",
            )
        stored = await memory_store.get("s1")
        assert stored is not None
        assert stored.status is SessionStatus.PENDING

    async def test_unknown_field_raises(self, memory_store: InMemorySessionStore) -> None:
        await memory_store.create("s1", "uploads/s1.pdf")
        with pytest.raises(ValueError, match="Unknown session fields"):
            await memory_store.update("s1", source_ref="uploads/other.pdf")

    async def test_invalid_transition_leaves_record_unchanged(
        self, memory_store: InMemorySessionStore
    ) -> None:
        created = await memory_store.create("s1", "uploads/s1.pdf")
        with pytest.raises(ValueError):
            await memory_store.update("s1", status=SessionStatus.COMPLETED, progress=100)
        assert await memory_store.get("s1") == created

    async def test_completes_with_result(self, memory_store: InMemorySessionStore) -> None:
        await memory_store.create("s1", "uploads/s1.pdf")
        await memory_store.update("s1", status=SessionStatus.PROCESSING, progress=50)
        done = await memory_store.update(
            "s1",
            expected_status=SessionStatus.PROCESSING,
            status=SessionStatus.COMPLETED,
            progress=100,
            result=Insight(summary="Balanced"),
        )
        assert done.result == Insight(summary="Balanced")
