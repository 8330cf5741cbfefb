from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from portfolio_review.insights.models import Insight


class SessionStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.FAILED)


class SessionStage(str, Enum):
    PARSING = "parsing"
    ANALYZING = "analyzing"
    GENERATING = "generating"


# Fields the orchestrator may change through BaseSessionStore.update().
UPDATABLE_FIELDS = frozenset(
    {"status", "stage", "progress", "result", "error", "phone_verified"}
)


@dataclass(frozen=True)
class Session:
    """One tracked analysis request, from trigger to terminal outcome.

    Construction validates the lifecycle invariants, so a store can never hand
    out a record where ``result`` and ``error`` disagree with ``status``.
    """

    id: str
    source_ref: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    stage: SessionStage | None = None
    progress: int = 0
    result: Insight | None = None
    error: str | None = None
    phone_verified: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.progress <= 100:
            raise ValueError(f"progress must be within 0..100, got {self.progress}")
        if self.stage is not None and self.status is not SessionStatus.PROCESSING:
            raise ValueError(f"stage is only allowed while processing, status={self.status.value}")
        if (self.result is not None) != (self.status is SessionStatus.COMPLETED):
            raise ValueError("result must be present exactly when status is completed")
        if self.status is SessionStatus.COMPLETED and self.progress != 100:
            raise ValueError("completed sessions must report progress 100")
        if self.status is SessionStatus.FAILED:
            if not self.error:
                raise ValueError("failed sessions must carry a non-empty error")
        elif self.error is not None:
            raise ValueError("error is only allowed on failed sessions")
