"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from drink_journal.api.records import router as records_router
from drink_journal.api.stats import router as stats_router
from drink_journal.api.suggestions import router as suggestions_router
from drink_journal.app_logging import configure_logging
from drink_journal.containers import AppContainer
from drink_journal.errors import PersistenceFailure, ValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.record_store.refresh()
        except PersistenceFailure:
            logger.exception("Failed to load drink records, starting empty")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(records_router)
    app.include_router(stats_router)
    app.include_router(suggestions_router)

    @app.exception_handler(ValidationError)
    async def validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(PersistenceFailure)
    async def persistence_failure(_: Request, exc: PersistenceFailure) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": _persistence_message(container, exc),
                "action": exc.action,
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _persistence_message(container: AppContainer, exc: PersistenceFailure) -> str:
    """Return a user-facing storage error with local debug info."""
    if exc.action == "load":
        fallback = "Couldn't load your records. Showing the last loaded state."
    else:
        fallback = "Your change is kept on screen but wasn't saved. Please retry."
    if container.settings.environment == "local":
        return f"{fallback} (debug: {exc.message})"
    return fallback
