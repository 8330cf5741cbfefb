from portfolio_review.sessions.models import SessionStage

# Cause text beyond this length is cut so that error messages stay short.
_MAX_CAUSE_LENGTH = 300


class PipelineError(Exception):
    """Base exception for pipeline-related errors."""


class DuplicateTaskError(PipelineError):
    """Raised when a background task is already running for a session."""


class StageFailure(PipelineError):
    """A pipeline stage failed; recorded on the session, never raised to callers."""

    MESSAGES: dict[SessionStage, str] = {
        SessionStage.PARSING: "Failed to extract text from document",
        SessionStage.ANALYZING: "Failed to analyze portfolio",
        SessionStage.GENERATING: "Failed to generate insights",
    }

    def __init__(self, stage: SessionStage, cause: str = "") -> None:
        self.stage = stage
        self.cause = cause[:_MAX_CAUSE_LENGTH]
        super().__init__(self.message)

    @classmethod
    def from_exception(cls, stage: SessionStage, exc: BaseException) -> "StageFailure":
        if isinstance(exc, StageFailure):
            return exc
        return cls(stage, str(exc) or type(exc).__name__)

    @property
    def message(self) -> str:
        text = f"{self.stage.value}: {self.MESSAGES[self.stage]}"
        if self.cause:
            text = f"{text} ({self.cause})"
        return text
