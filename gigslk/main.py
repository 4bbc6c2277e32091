"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from gigslk import __version__
from gigslk.api.middleware.error_handler import error_handler_middleware
from gigslk.api.middleware.latency_logging import latency_logging_middleware
from gigslk.api.middleware.request_size import request_size_limit_middleware
from gigslk.api.routes import admin, artists, auth, health, previews, profiles
from gigslk.core.config import get_settings
from gigslk.core.http_client import init_http_client, shutdown_http_client
from gigslk.services.editor_registry import (
    get_editor_registry,
    init_editor_registry,
    shutdown_editor_registry,
)
from gigslk.services.preview_registry import get_preview_registry
from gigslk.services.session_service import (
    get_session_service,
    init_session_service,
    shutdown_session_service,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def connect_session_teardown() -> None:
    """Close a session's editors and drop its previews when it ends."""
    sessions = get_session_service()
    sessions.on_destroy(get_editor_registry().close_session)
    sessions.on_destroy(get_preview_registry().release_owner)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control back to the application.
    """
    # Startup
    settings = get_settings()
    logger.info("Starting %s in %s mode", settings.app_name, settings.app_env)

    await init_http_client()
    logger.info("Upstream client initialized for %s", settings.api_base_url)

    # Initialize session store with cleanup task
    await init_session_service()
    logger.info("Session store initialized")

    # Initialize editor registry with cleanup task
    await init_editor_registry()
    logger.info("Editor registry initialized")

    yield
    # Shutdown
    await shutdown_editor_registry()
    logger.info("Editor registry shutdown")
    await shutdown_session_service()
    logger.info("Session store shutdown")
    logger.info("Released %d staged previews", get_preview_registry().clear())
    await shutdown_http_client()
    logger.info("Upstream client closed")
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Gigs.lk Portal API",
        description="Profile editing, artist directory and admin backend for the gigs marketplace",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    connect_session_teardown()

    # Middleware added last runs first.

    # Add request size limit middleware (rejects oversized uploads before routing)
    app.add_middleware(BaseHTTPMiddleware, dispatch=request_size_limit_middleware)

    # Add error handler middleware (turns APIError into the JSON error body)
    app.add_middleware(BaseHTTPMiddleware, dispatch=error_handler_middleware)

    # Add latency logging middleware (sees the final status code)
    app.add_middleware(BaseHTTPMiddleware, dispatch=latency_logging_middleware)

    # Configure CORS (outermost, so error responses carry CORS headers too)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["x-session-token"],
    )

    # Mount health routes at root level (no prefix)
    app.include_router(health.router)

    # Create API v1 router for versioned endpoints
    api_v1_router = APIRouter(prefix="/api/v1")

    api_v1_router.include_router(auth.router)

    # Profile editing and staged-file previews
    api_v1_router.include_router(profiles.router)
    api_v1_router.include_router(previews.router)

    # Public directory and admin panel
    api_v1_router.include_router(artists.router)
    api_v1_router.include_router(admin.router)

    app.include_router(api_v1_router)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gigslk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
