import uuid
from pathlib import Path

from portfolio_review.config.settings import Settings
from portfolio_review.extraction.factory import TextExtractorFactory
from portfolio_review.insights.text_parser import TextInsightParser
from portfolio_review.interpretation.factory import InterpreterFactory
from portfolio_review.logging.logger import Log
from portfolio_review.pipeline.job_runner import AnalysisJobRunner
from portfolio_review.pipeline.pipeline import STAGE_ENTRY_PROGRESS
from portfolio_review.pipeline.steps import (
    BuildInsightStep,
    DownloadDocumentStep,
    ExtractTextStep,
    InterpretStep,
)
from portfolio_review.pipeline.task_runner import BackgroundTaskRunner
from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.exceptions import (
    SessionNotFoundError,
    SessionStateError,
    SessionValidationError,
)
from portfolio_review.sessions.models import Session, SessionStage, SessionStatus
from portfolio_review.storage.base import BaseDocumentStorage
from portfolio_review.storage.local_storage import LocalDocumentStorage


class PipelineOrchestrator:
    """Creates sessions and starts their analysis in the background.

    ``start`` performs the first transition synchronously and hands the rest of
    the work to the task runner, so callers never wait for the pipeline.
    """

    def __init__(
        self,
        store: BaseSessionStore,
        job_runner: AnalysisJobRunner,
        task_runner: BackgroundTaskRunner,
        *,
        require_phone_verification: bool = False,
    ) -> None:
        self._store = store
        self._job_runner = job_runner
        self._task_runner = task_runner
        self._require_phone_verification = require_phone_verification

    @property
    def task_runner(self) -> BackgroundTaskRunner:
        return self._task_runner

    async def create_session(self, source_ref: str, session_id: str | None = None) -> Session:
        """Register a pending session for an uploaded document."""
        if not source_ref:
            raise SessionValidationError("Source reference is required")
        session = await self._store.create(session_id or str(uuid.uuid4()), source_ref)
        Log.info("Session created", session_id=session.id)
        return session

    async def start(self, session_id: str | None) -> Session:
        """Move a pending session to processing/parsing and run it detached.

        Raises:
            SessionValidationError: if no id was given or verification is
                required and missing.
            SessionNotFoundError: if the session does not exist.
            SessionStateError: if the session is not pending.
        """
        if not session_id:
            raise SessionValidationError("Upload ID is required")
        session = await self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        if session.status is not SessionStatus.PENDING:
            raise SessionStateError(
                f"Session {session_id} is already {session.status.value}"
            )
        if not session.phone_verified and self._require_phone_verification:
            raise SessionValidationError("Phone number not verified")

        session = await self._store.update(
            session_id,
            expected_status=SessionStatus.PENDING,
            status=SessionStatus.PROCESSING,
            stage=SessionStage.PARSING,
            progress=STAGE_ENTRY_PROGRESS[SessionStage.PARSING],
            phone_verified=True,
        )
        self._task_runner.submit(
            session_id, self._job_runner.run(session_id, session.source_ref)
        )
        Log.info("Processing started", session_id=session_id)
        return session


def build_orchestrator(
    settings: Settings,
    store: BaseSessionStore,
    storage: BaseDocumentStorage | None = None,
) -> PipelineOrchestrator:
    """Build a PipelineOrchestrator with all required adapters."""
    storage = storage or LocalDocumentStorage(Path(settings.storage_root))
    steps = [
        DownloadDocumentStep(storage),
        ExtractTextStep(TextExtractorFactory.create(settings)),
        InterpretStep(InterpreterFactory.create(settings)),
        BuildInsightStep(TextInsightParser()),
    ]
    return PipelineOrchestrator(
        store=store,
        job_runner=AnalysisJobRunner(store, steps),
        task_runner=BackgroundTaskRunner(),
        require_phone_verification=settings.require_phone_verification,
    )
