"""Student API - FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the response envelope
    - Settings passed in by the caller and stored on app.state (no module globals)

Design Decisions:
    - Factory over module-level app: configuration must be loaded (and may
      fail) before an app exists
    - Lifespan over @app.on_event: FastAPI recommended pattern
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from student_api import __version__
from student_api.api.error_handlers import register_error_handlers
from student_api.api.routes import health, students
from student_api.config import Settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    """Build the FastAPI app for the given settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Student API started",
            extra={"env": settings.env.value, "address": settings.http_server.address},
        )
        yield
        logger.info("Student API shutting down")

    app = FastAPI(
        title="Student API", version=__version__, lifespan=lifespan,
    )
    app.state.settings = settings

    # Routes - explicit registration
    app.include_router(health.router)
    app.include_router(students.router)

    register_error_handlers(app)
    return app
