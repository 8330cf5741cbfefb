from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from portfolio_review.insights.models import Insight
from portfolio_review.interpretation.models import InterpretationResult
from portfolio_review.sessions.models import SessionStage

# Progress written when a stage is entered. Steps report their own progress
# on completion; the runner never lets it decrease.
STAGE_ENTRY_PROGRESS: dict[SessionStage, int] = {
    SessionStage.PARSING: 10,
    SessionStage.ANALYZING: 50,
    SessionStage.GENERATING: 90,
}


@dataclass(slots=True)
class PipelineContext:
    session_id: str
    source_ref: str
    raw_bytes: bytes = b""
    extracted_text: str = ""
    interpretation: InterpretationResult | None = None
    insight: Insight | None = None
    defaulted_fields: list[str] = field(default_factory=list)


class PipelineStep(ABC):
    stage: ClassVar[SessionStage]
    progress: ClassVar[int]

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
