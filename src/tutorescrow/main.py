# File: src/tutorescrow/main.py
"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from tutorescrow.core.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", message="tutorescrow starting up", timestamp=start_time.isoformat())

    from tutorescrow.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="tutorescrow shutting down gracefully")


def _setup_middleware(app: FastAPI) -> None:
    """Configure all middleware in correct order."""
    # Last added = first executed: RequestIDMiddleware wraps everything
    from tutorescrow.middleware.logging import RequestIDMiddleware
    from tutorescrow.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from tutorescrow.api.health import router as health_router
    from tutorescrow.api.tutoring_session import router as tutoring_session_router
    from tutorescrow.api.tutoring_session_audit import router as tutoring_session_audit_router

    app.include_router(health_router)
    app.include_router(tutoring_session_router)
    app.include_router(tutoring_session_audit_router)


def create_app() -> FastAPI:
    """Application factory for tutorescrow."""
    from tutorescrow.core.exception_handlers import register_exception_handlers
    from tutorescrow.core.sentry import init_sentry

    init_sentry()

    app = FastAPI(
        title="tutorescrow API",
        description="Peer-to-peer tutoring bookings with escrowed payment",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    _setup_middleware(app)
    _register_routers(app)

    logger.info(
        "app.configured",
        message="FastAPI application created successfully",
        environment=os.getenv("ENVIRONMENT", "development"),
    )

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "tutorescrow.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
