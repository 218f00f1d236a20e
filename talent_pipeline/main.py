"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from talent_pipeline import __version__
from talent_pipeline.core.config import settings
from talent_pipeline.core.logging import configure_logging
from talent_pipeline.errors import AppError, app_error_handler, request_validation_error_handler
from talent_pipeline.routers import activity, health, pipeline, placements, scorecards

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    Logging is configured on startup; the engine's connection pool is
    owned by talent_pipeline.db.session.
    """
    configure_logging()
    logger.info("Starting %s...", settings.APP_NAME)

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Candidate pipeline and placement lifecycle engine",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(pipeline.router)
app.include_router(activity.router)
app.include_router(scorecards.router)
app.include_router(placements.router)


@app.get("/")
async def root():
    """Root endpoint - just to check the API is running."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "docs": "/docs",
    }
