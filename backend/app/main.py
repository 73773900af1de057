"""FastAPI application factory."""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.bookings import router as bookings_router
from backend.app.api.components import router as components_router
from backend.app.api.emails import router as emails_router
from backend.app.api.health import get_health
from backend.app.api.searches import router as searches_router
from backend.app.api.trips import router as trips_router
from backend.app.config import get_settings
from backend.app.errors import AppError, app_error_handler

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Tripwise API",
        description="Conversational trip planning - Backend API",
        version="0.1.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)

    # Health check endpoint
    @app.get("/healthz")
    async def healthz() -> dict[str, Any]:
        """Health check endpoint."""
        result = await get_health()
        return result.model_dump()

    # Include routers
    app.include_router(components_router)
    app.include_router(bookings_router)
    app.include_router(emails_router)
    app.include_router(searches_router)
    app.include_router(trips_router)

    logger.info("Application configured for origin %s", settings.ui_origin)
    return app


# Create app instance for uvicorn
app = create_app()
