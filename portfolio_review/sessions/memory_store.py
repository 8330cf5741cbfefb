import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.exceptions import (
    DuplicateSessionError,
    SessionNotFoundError,
    SessionStateError,
)
from portfolio_review.sessions.models import UPDATABLE_FIELDS, Session, SessionStatus


class InMemorySessionStore(BaseSessionStore):
    """Session store backed by a dict, for development and tests.

    Sessions are immutable values, so readers always see a consistent
    snapshot and can never mutate stored state.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def create(self, session_id: str, source_ref: str) -> Session:
        async with self._lock:
            if session_id in self._sessions:
                raise DuplicateSessionError(f"Session {session_id} already exists")
            now = datetime.now(timezone.utc)
            session = Session(
                id=session_id,
                source_ref=source_ref,
                status=SessionStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            self._sessions[session_id] = session
            return session

    async def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    async def update(
        self,
        session_id: str,
        *,
        expected_status: SessionStatus | None = None,
        **fields: Any,
    ) -> Session:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown session fields: {sorted(unknown)}")
        async with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                raise SessionNotFoundError(f"Session {session_id} not found")
            if expected_status is not None and current.status is not expected_status:
                raise SessionStateError(
                    f"Session {session_id} is {current.status.value}, "
                    f"expected {expected_status.value}"
                )
            updated = replace(current, updated_at=datetime.now(timezone.utc), **fields)
            self._sessions[session_id] = updated
            return updated
