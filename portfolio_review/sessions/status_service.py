from dataclasses import dataclass
from datetime import datetime
from typing import Any

from portfolio_review.insights.models import Insight
from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.exceptions import SessionNotFoundError, SessionValidationError
from portfolio_review.sessions.models import Session, SessionStage, SessionStatus


@dataclass(frozen=True)
class SessionStatusView:
    """Read-only projection of a session served to polling clients."""

    id: str
    status: SessionStatus
    progress: int
    updated_at: datetime
    stage: SessionStage | None = None
    result: Insight | None = None
    error: str | None = None

    @classmethod
    def from_session(cls, session: Session) -> "SessionStatusView":
        return cls(
            id=session.id,
            status=session.status,
            progress=session.progress,
            updated_at=session.updated_at,
            stage=session.stage,
            result=session.result,
            error=session.error,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON body; ``result`` and ``error`` only when present."""
        data: dict[str, Any] = {
            "id": self.id,
            "status": self.status.value,
            "stage": self.stage.value if self.stage is not None else None,
            "progress": self.progress,
        }
        if self.result is not None:
            data["result"] = self.result.to_dict()
        if self.error is not None:
            data["error"] = self.error
        data["updatedAt"] = self.updated_at.isoformat()
        return data


class StatusService:
    """Side-effect-free read path over the session store."""

    def __init__(self, store: BaseSessionStore) -> None:
        self._store = store

    async def get(self, session_id: str | None) -> SessionStatusView:
        """Return the latest projection of a session.

        Raises:
            SessionValidationError: if no id was supplied.
            SessionNotFoundError: if the id was never created.
        """
        if not session_id:
            raise SessionValidationError("Analysis ID is required")
        session = await self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError("Analysis not found")
        return SessionStatusView.from_session(session)
