"""FastAPI application entry point.

Run with:
    uvicorn mlms.main:app --host 0.0.0.0 --port 8000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mlms import __version__
from mlms.api import api_router, register_exception_handlers
from mlms.api.routers import health
from mlms.config import Settings, get_settings
from mlms.infrastructure.observability import RequestLoggingMiddleware, configure_logging
from mlms.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me - the lifespan owns the ONE Database (engine + pool) for this process. It's put on
# app.state.db so get_db_session() can hand out a session per request, and disposed on shutdown.
# Tables are created with metadata.create_all - there's no migration tooling in this service.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    configure_logging(
        log_level=settings.logging.level,
        json_format=settings.logging.json_format,
        app_name=settings.app_name,
    )

    db = Database(settings)
    await db.create_tables()
    app.state.db = db
    app.state.startup_time = datetime.now(UTC)
    logger.info("Application started", extra={"version": __version__})

    try:
        yield
    finally:
        await db.close()
        logger.info("Application stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings (tests pass an isolated database here).
            Defaults to the cached environment settings.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="MLMS - Music Library Management Service",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()
