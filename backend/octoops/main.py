"""FastAPI application entry point.

Run with ``uvicorn octoops.main:app``.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from octoops import __version__
from octoops.api import router as api_router
from octoops.api.errors import register_exception_handlers
from octoops.config import Settings, get_settings
from octoops.db.session import close_db, init_db
from octoops.middleware.logging import LoggingMiddleware, configure_logging
from octoops.middleware.request_id import RequestIDMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database pool on startup and dispose of it on shutdown."""
    logger.info("app_starting", version=__version__, environment=app.state.environment)
    await init_db()
    logger.info("database_ready")

    yield

    await close_db()
    logger.info("app_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for ``settings`` (the cached settings by default)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.environment != "development")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Tasks, team invitations and project settings",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    app.state.environment = settings.environment

    # Last added runs first: request id -> request log -> CORS -> routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()
