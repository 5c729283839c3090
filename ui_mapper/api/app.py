"""FastAPI application factory for the UI Mapper framework."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..core.config import config
from ..core.logger import log
from ..core.session import AnnotationSession
from .routes import project_router, screenshot_router, session_router, set_session


def create_app(session: Optional[AnnotationSession] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session: Session served by the routes. A default one backed by the
            JSON project store is created lazily when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    set_session(session)

    app = FastAPI(
        title="UI Mapper API",
        description="Screenshot UI component detection, annotation and export",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add request logging middleware
    @app.middleware("http")
    async def log_requests(request, call_next):
        log.info(f"API Request: {request.method} {request.url}")
        response = await call_next(request)
        log.info(f"API Response: {response.status_code}")
        return response

    # Include routers
    app.include_router(project_router, prefix="/api/v1/projects", tags=["projects"])
    app.include_router(screenshot_router, prefix="/api/v1/screenshots", tags=["screenshots"])
    app.include_router(session_router, prefix="/api/v1/session", tags=["session"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "UI Mapper API", "version": __version__}

    @app.get("/")
    async def root():
        return {
            "message": "UI Mapper API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    log.info("FastAPI application created successfully")
    return app
