from fastapi import Request

from portfolio_review.config.settings import Settings
from portfolio_review.pipeline.orchestrator import PipelineOrchestrator
from portfolio_review.sessions.status_service import StatusService
from portfolio_review.storage.base import BaseDocumentStorage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> BaseDocumentStorage:
    return request.app.state.storage


def get_orchestrator(request: Request) -> PipelineOrchestrator:
    return request.app.state.orchestrator


def get_status_service(request: Request) -> StatusService:
    return request.app.state.status_service
