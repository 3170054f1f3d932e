"""FastAPI application for the task tracker.

Routes live in :mod:`app.api.routes`; this module wires the service,
CORS, the optional static frontend and the JSON error bodies
(``{"error": "..."}``) that the browser client expects.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router as task_router
from app.api.schemas import HealthResponse
from app.config import APP_VERSION, SETTINGS, Settings
from app.domain.errors import NotFoundError, StorageError, TaskError, ValidationError
from app.infra.repository import TaskRepository
from app.infra.storage import JsonFileStorage, init_storage
from app.services.task_service import TaskService

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[TaskError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    StorageError: 500,
}


def build_service(settings: Settings) -> TaskService:
    storage = JsonFileStorage(settings.tasks_file)
    init_storage(storage)
    repo = TaskRepository(storage, strict_writes=settings.strict_writes)
    return TaskService(repo)


def create_app(service: TaskService | None = None, settings: Settings = SETTINGS) -> FastAPI:
    app = FastAPI(
        title="Task Tracker API",
        description="CRUD API over a flat-file task collection",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.task_service = service if service is not None else build_service(settings)

    wildcard = "*" in settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=not wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(task_router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return HealthResponse(version=APP_VERSION)

    if settings.static_dir is not None:
        if settings.static_dir.is_dir():
            app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="frontend")
        else:
            logger.warning("STATIC_DIR %s is not a directory, frontend not served", settings.static_dir)

    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskError)
    async def task_error_handler(request: Request, exc: TaskError) -> JSONResponse:
        status = next(
            (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)),
            500,
        )
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=status, content={"error": "Failed to save tasks"})
        return JSONResponse(status_code=status, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        mentions_title = any("title" in error.get("loc", ()) for error in exc.errors())
        if not mentions_title:
            message = "Invalid request body"
        elif request.method == "POST":
            message = "Task title is required"
        else:
            message = "Task title must be a string"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
