from typing import Any

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from portfolio_review.api.dependencies import (
    get_orchestrator,
    get_settings,
    get_status_service,
    get_storage,
)
from portfolio_review.config.settings import Settings
from portfolio_review.pipeline.orchestrator import PipelineOrchestrator
from portfolio_review.sessions.exceptions import SessionValidationError
from portfolio_review.sessions.status_service import StatusService
from portfolio_review.storage.base import BaseDocumentStorage

router = APIRouter(prefix="/api/review", tags=["review"])


class ProcessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_id: str | None = Field(default=None, alias="uploadId")
    session_id: str | None = Field(default=None, alias="sessionId")


@router.post("/upload")
async def upload_document(
    file: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    storage: BaseDocumentStorage = Depends(get_storage),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Store the PDF from the multipart `file` field and register a pending session."""
    if file is None or not file.filename:
        raise SessionValidationError("No file provided")
    if "pdf" not in (file.content_type or "").lower():
        raise SessionValidationError("Only PDF files are allowed")
    payload = await file.read()
    if not payload:
        raise SessionValidationError("No file provided")
    if len(payload) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise SessionValidationError(f"File size must be less than {limit_mb}MB")

    source_ref = await storage.upload_file(payload, file.filename)
    session = await orchestrator.create_session(source_ref)
    return {
        "success": True,
        "message": "File uploaded successfully",
        "uploadId": session.id,
    }


@router.post("/process")
async def start_processing(
    body: ProcessRequest,
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Kick off the analysis pipeline; returns before any stage runs."""
    session = await orchestrator.start(body.upload_id or body.session_id)
    return {
        "success": True,
        "message": "Processing started",
        "analysisId": session.id,
    }


@router.get("/status")
async def get_status(
    analysis_id: str | None = Query(default=None, alias="id"),
    status_service: StatusService = Depends(get_status_service),
) -> dict[str, Any]:
    view = await status_service.get(analysis_id)
    return {"success": True, "data": view.to_dict()}
