from collections.abc import Sequence

from portfolio_review.logging.logger import Log
from portfolio_review.pipeline.exceptions import StageFailure
from portfolio_review.pipeline.pipeline import STAGE_ENTRY_PROGRESS, PipelineContext, PipelineStep
from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.models import SessionStage, SessionStatus


class AnalysisJobRunner:
    """Drive one session through the pipeline steps to a terminal state.

    Every stage change and progress increase is written to the store before
    the next step starts. Any exception ends the run with a ``failed`` session;
    nothing is raised to the caller and nothing is retried.
    """

    def __init__(self, store: BaseSessionStore, steps: Sequence[PipelineStep]) -> None:
        self._store = store
        self._steps = list(steps)

    async def run(self, session_id: str, source_ref: str) -> None:
        context = PipelineContext(session_id=session_id, source_ref=source_ref)
        stage = SessionStage.PARSING
        progress = STAGE_ENTRY_PROGRESS[stage]
        Log.info("Analysis started", session_id=session_id)

        try:
            for step in self._steps:
                if step.stage is not stage:
                    # Failures of the entry write belong to the stage being left.
                    entry_progress = max(progress, STAGE_ENTRY_PROGRESS[step.stage])
                    await self._store.update(
                        session_id, stage=step.stage, progress=entry_progress
                    )
                    stage, progress = step.stage, entry_progress
                    Log.info("Stage entered", session_id=session_id, stage=stage.value)

                await step.run(context)

                if step.progress > progress:
                    progress = step.progress
                    await self._store.update(session_id, progress=progress)

            if context.insight is None:
                raise ValueError("Pipeline finished without producing insights")
            await self._store.update(
                session_id,
                expected_status=SessionStatus.PROCESSING,
                status=SessionStatus.COMPLETED,
                stage=None,
                progress=100,
                result=context.insight,
            )
        except Exception as exc:  # noqa: BLE001
            await self._mark_failed(session_id, StageFailure.from_exception(stage, exc))
            return

        Log.info("Analysis completed", session_id=session_id)

    async def _mark_failed(self, session_id: str, failure: StageFailure) -> None:
        Log.error(f"Analysis failed: {failure.message}", session_id=session_id)
        try:
            await self._store.update(
                session_id,
                expected_status=SessionStatus.PROCESSING,
                status=SessionStatus.FAILED,
                stage=None,
                result=None,
                error=failure.message,
            )
        except Exception:  # noqa: BLE001
            Log.exception(
                "Could not record failure, session left processing",
                session_id=session_id,
            )
