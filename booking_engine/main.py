"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_engine import __version__
from booking_engine.core.config import settings
from booking_engine.core.logging import configure_logging
from booking_engine.db.session import engine
from booking_engine.errors import BookingEngineError, booking_engine_error_handler
from booking_engine.routers import bookings, calendar, health, resources

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    Configures logging on startup and releases pooled connections on shutdown.
    """
    configure_logging()
    logger.info("Starting %s...", settings.APP_NAME)

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)
    await engine.dispose()


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant booking scheduling and conflict engine",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(BookingEngineError, booking_engine_error_handler)

# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(resources.router)
app.include_router(bookings.router)
app.include_router(calendar.router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - basic API info."""
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "docs": "/docs",
    }
