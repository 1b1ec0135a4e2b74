"""Error Handlers - global exception handlers for the Student API.

Invariants:
    - StudentAPIError -> envelope with its own status and message
    - Starlette HTTPException (404, 405, ...) -> envelope with the same status
    - RequestValidationError -> 400 envelope with field-level details
    - Exception (catch-all) -> 500 envelope, never leaks internal details

Design Decisions:
    - Four-layer handler: domain, framework HTTP, validation, catch-all
    - Kept out of main.py so create_app() stays a short wiring function
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from student_api.api.responses import error
from student_api.core.errors import ErrorSeverity, StudentAPIError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_student_api_error_handler(app)
    _register_http_exception_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_student_api_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(StudentAPIError)
    async def student_api_error_handler(request: Request, exc: StudentAPIError):
        """Handle all Student API errors."""
        level = (
            logging.WARNING
            if exc.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)
            else logging.ERROR
        )
        logger.log(
            level,
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "method": request.method,
                "path": request.url.path,
                "debug_info": exc.context.debug_info,
            },
        )
        return error(exc.http_status, exc.message)


def _register_http_exception_handler(app: FastAPI) -> None:
    """Register framework HTTP error handler (unknown routes, wrong methods)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        logger.info(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}",
            extra={"status_code": exc.status_code},
        )
        response = error(exc.status_code, exc.detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return error(
            status.HTTP_400_BAD_REQUEST, _build_validation_details(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
        )


def _build_validation_details(exc: RequestValidationError) -> list[dict]:
    """Build field-level validation details."""
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
