"""Saved objects HTTP API - FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from saved_objects.api.routes.saved_objects import router as saved_objects_router
from saved_objects.config import get_settings, setup_logging
from saved_objects.config.settings import Settings
from saved_objects.db.database import Database
from saved_objects.db.repositories.saved_object_repository import SavedObjectRepository
from saved_objects.exceptions import SavedObjectsError
from saved_objects.services.export_service import ExportService
from saved_objects.services.import_service import ImportService
from saved_objects.services.saved_object_service import SavedObjectService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    The database is opened and migrated in the lifespan, and services are
    attached to `app.state`.

    Args:
        settings: Settings to use (global settings when None)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = Database(settings.database_path)
        await db.connect()
        await db.migrate()

        repository = SavedObjectRepository(db)
        app.state.db = db
        app.state.saved_object_service = SavedObjectService(repository, settings)
        app.state.export_service = ExportService(repository, settings)
        app.state.import_service = ImportService(repository, db, settings)

        logger.info(
            "Saved objects API starting: database=%s, types=%d",
            settings.database_path,
            len(settings.supported_types),
        )
        try:
            yield
        finally:
            await db.close()
            logger.info("Saved objects API shut down")

    app = FastAPI(
        title="Saved Objects",
        description="Export and import of typed, reference-linked saved objects",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.exception_handler(SavedObjectsError)
    async def saved_objects_error_handler(
        request: Request, exc: SavedObjectsError
    ) -> JSONResponse:
        """Return request-level errors as {statusCode, error, message}."""
        logger.warning(
            "%s %s rejected: %s (status=%d)",
            request.method,
            request.url.path,
            exc.message,
            exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed requests as 400 in the same error shape."""
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = f"[request {location}]: {first.get('msg', 'invalid value')}"
        else:
            message = "Invalid request"
        logger.warning("%s %s invalid: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=400,
            content={"statusCode": 400, "error": "Bad Request", "message": message},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions with a generic error response."""
        logger.exception("Unexpected error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "statusCode": 500,
                "error": "Internal Server Error",
                "message": "An internal server error occurred",
            },
        )

    app.include_router(saved_objects_router)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "ok"})

    return app
