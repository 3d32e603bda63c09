"""FastAPI application factory."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.auth import router as auth_router
from backend.app.api.errors import register_exception_handlers
from backend.app.api.health import router as health_router
from backend.app.api.media import router as media_router
from backend.app.api.watchlist import router as watchlist_router
from backend.app.config import get_settings
from backend.app.logging_config import configure_logging
from backend.app.models.common import ErrorResponse
from backend.app.security.middleware import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 409, 502)
}


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Settings are loaded eagerly so missing secrets abort startup.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Watchlist API",
        description="Entertainment watchlist backend",
        version="0.1.0",
    )

    # Security middleware (before CORS)
    app.add_middleware(SecurityHeadersMiddleware)

    allow_all = settings.ui_origin == "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else [settings.ui_origin],
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX, responses=ERROR_RESPONSES)
    app.include_router(auth_router, prefix=API_PREFIX, responses=ERROR_RESPONSES)
    app.include_router(media_router, prefix=API_PREFIX, responses=ERROR_RESPONSES)
    app.include_router(watchlist_router, prefix=API_PREFIX, responses=ERROR_RESPONSES)

    logger.info("Application configured")
    return app


# Create app instance for uvicorn
app = create_app()
