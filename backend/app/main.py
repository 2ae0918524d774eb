"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.dependencies import ControllerRegistry
from app.api.routes import api_router
from app.config import AppSettings, get_settings
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry
from app.db.session import Database
from eventdesk.errors import PersistenceError, RecordNotFound, ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI, settings: AppSettings, database: Database | None, owns_database: bool):
    if database is not None:
        await database.create_all()
    registry = ControllerRegistry(settings, database)
    app.state.controllers = registry
    logger.info("Starting %s with %s storage", settings.app_name, settings.storage_backend)
    try:
        yield
    finally:
        await registry.close()
        if database is not None and owns_database:
            await database.dispose()


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(RecordNotFound)
    async def _not_found(request: Request, exc: RecordNotFound) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(PersistenceError)
    async def _persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Data store unavailable; the change is shown locally but was not saved"},
        )


def create_app(settings: AppSettings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging()
    logger.debug("Settings: %s", settings.dict_for_logging())

    owns_database = False
    if database is None and settings.storage_backend == "sql":
        database = Database(settings.database_url)
        owns_database = True

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, settings, database, owns_database),
    )
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "x-request-id"],
    )
    _register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "storage": settings.storage_backend,
            "timestamp": datetime.now().isoformat(),
        }

    setup_telemetry(app, settings, engine=database.engine if database is not None else None)
    return app


app = create_app()

__all__ = ["app", "create_app"]
