from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_review.api.routes.review import router as review_router
from portfolio_review.config.settings import Settings
from portfolio_review.logging.logger import Log
from portfolio_review.pipeline.orchestrator import PipelineOrchestrator, build_orchestrator
from portfolio_review.sessions.base import BaseSessionStore
from portfolio_review.sessions.exceptions import (
    DuplicateSessionError,
    SessionError,
    SessionNotFoundError,
    SessionValidationError,
)
from portfolio_review.sessions.factory import SessionStoreFactory
from portfolio_review.sessions.status_service import StatusService
from portfolio_review.storage.base import BaseDocumentStorage
from portfolio_review.storage.local_storage import LocalDocumentStorage

_ERROR_STATUS: dict[type[SessionError], int] = {
    SessionValidationError: 400,
    SessionNotFoundError: 404,
    DuplicateSessionError: 409,
}


def create_app(
    settings: Settings | None = None,
    *,
    store: BaseSessionStore | None = None,
    storage: BaseDocumentStorage | None = None,
    orchestrator: PipelineOrchestrator | None = None,
) -> FastAPI:
    """Build the API.

    Collaborators passed in are used as-is and bound immediately; anything
    missing is built from settings when the app starts.
    """
    settings = settings or Settings()
    app = FastAPI(title="Portfolio Review API", version="0.1.0", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.storage = storage or LocalDocumentStorage(Path(settings.storage_root))
    app.state.owns_store = store is None
    if store is not None:
        _bind(app, store, orchestrator)

    app.include_router(review_router)
    app.add_exception_handler(SessionError, _session_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/healthz")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def _bind(
    app: FastAPI,
    store: BaseSessionStore,
    orchestrator: PipelineOrchestrator | None = None,
) -> None:
    app.state.store = store
    app.state.orchestrator = orchestrator or build_orchestrator(
        app.state.settings, store, app.state.storage
    )
    app.state.status_service = StatusService(store)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    if not hasattr(app.state, "store"):
        _bind(app, await SessionStoreFactory.create(app.state.settings))
    Log.info("Portfolio review API started", env=app.state.settings.app_env)
    try:
        yield
    finally:
        await app.state.orchestrator.task_runner.shutdown()
        if app.state.owns_store:
            await app.state.store.close()
        Log.info("Portfolio review API stopped")


async def _session_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)),
        500,
    )
    if status_code >= 500:
        Log.error(f"Unhandled session error on {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})


async def _request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    Log.debug(f"Rejected malformed request on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body"},
    )
