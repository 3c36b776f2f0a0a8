"""FastAPI application factory and server configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from amc.config import get_settings
from amc.db.base import close_db, init_db
from amc.handlers import register_exception_handlers
from amc.logging_config import setup_logging
from amc.middleware import RateLimitMiddleware, RequestIDMiddleware
from amc.routes import tracks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    # Startup
    await init_db()
    logger.info("Database initialised")

    yield

    # Shutdown
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # Routes
    app.include_router(tracks.router, prefix="/v1/tracks", tags=["tracks"])

    # Health check
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "amc-tracks"}

    # Root redirect
    @app.get("/")
    async def root():
        return JSONResponse(
            content={
                "service": settings.app_name,
                "version": "0.1.0",
                "docs": "/docs" if settings.debug else None,
            }
        )

    return app


app = create_app()
