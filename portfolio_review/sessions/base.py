from abc import ABC, abstractmethod
from typing import Any

from portfolio_review.sessions.models import Session, SessionStatus


class BaseSessionStore(ABC):
    """Contract for durable session storage.

    Implementations must make a single ``update`` atomic for its record and
    must let independent sessions be updated concurrently.
    """

    @abstractmethod
    async def create(self, session_id: str, source_ref: str) -> Session:
        """Create a pending session.

        Raises:
            DuplicateSessionError: if a session with this id already exists.
        """

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Return the current session, or None if the id is unknown."""

    @abstractmethod
    async def update(
        self,
        session_id: str,
        *,
        expected_status: SessionStatus | None = None,
        **fields: Any,
    ) -> Session:
        """Merge ``fields`` into the session and refresh ``updated_at``.

        Args:
            session_id: Target session.
            expected_status: When given, the write only happens if the stored
                status still equals it.
            **fields: Subset of ``UPDATABLE_FIELDS``.

        Raises:
            SessionNotFoundError: if the id is unknown.
            SessionStateError: if ``expected_status`` does not match.
            ValueError: on unknown field names or invariant violations.
        """

    async def close(self) -> None:
        """Release backing resources. No-op by default."""
