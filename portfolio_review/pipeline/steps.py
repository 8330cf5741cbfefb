import asyncio

from portfolio_review.extraction.base import BaseTextExtractor
from portfolio_review.extraction.exceptions import EmptyDocumentError
from portfolio_review.insights.text_parser import TextInsightParser
from portfolio_review.insights.validator import finalize_insight, validate_and_build
from portfolio_review.interpretation.base import BaseInterpreter
from portfolio_review.logging.logger import Log
from portfolio_review.pipeline.pipeline import PipelineContext, PipelineStep
from portfolio_review.sessions.models import SessionStage
from portfolio_review.storage.base import BaseDocumentStorage


class DownloadDocumentStep(PipelineStep):
    stage = SessionStage.PARSING
    progress = 20

    def __init__(self, storage: BaseDocumentStorage) -> None:
        self._storage = storage

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = await self._storage.download_file(context.source_ref)
        Log.info(
            f"Downloaded {len(context.raw_bytes)} bytes",
            session_id=context.session_id,
        )
        return context


class ExtractTextStep(PipelineStep):
    stage = SessionStage.PARSING
    progress = 40

    def __init__(self, extractor: BaseTextExtractor) -> None:
        self._extractor = extractor

    async def run(self, context: PipelineContext) -> PipelineContext:
        text = await asyncio.to_thread(self._extractor.extract, context.raw_bytes)
        if not text.strip():
            raise EmptyDocumentError("Document contains no extractable text")
        context.extracted_text = text
        Log.info(f"Extracted {len(text)} chars", session_id=context.session_id)
        return context


class InterpretStep(PipelineStep):
    stage = SessionStage.ANALYZING
    progress = 80

    def __init__(self, interpreter: BaseInterpreter) -> None:
        self._interpreter = interpreter

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.interpretation = await self._interpreter.interpret(context.extracted_text)
        return context


class BuildInsightStep(PipelineStep):
    stage = SessionStage.GENERATING
    progress = 95

    def __init__(self, parser: TextInsightParser) -> None:
        self._parser = parser

    async def run(self, context: PipelineContext) -> PipelineContext:
        interpretation = context.interpretation
        if interpretation is None:
            raise ValueError("PipelineContext.interpretation must be set before building insights")

        if interpretation.structured is not None:
            insight = validate_and_build(interpretation.structured)
        else:
            insight, context.defaulted_fields = self._parser.parse_with_report(
                interpretation.text or ""
            )
            if context.defaulted_fields:
                Log.debug(
                    "Insight fields resolved by defaults",
                    session_id=context.session_id,
                    fields=",".join(context.defaulted_fields),
                )
        context.insight = finalize_insight(insight)
        return context
