"""Error Hierarchy - typed, categorized exceptions for every Student API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400-level) are recoverable; startup/lifecycle errors are critical
    - Startup helpers raise these; only the process entry point decides to exit

Design Decisions:
    - Single hierarchy with StudentAPIError base: one FastAPI handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    LIFECYCLE = "lifecycle"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Extra context attached to an error for logs."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    debug_info: dict[str, Any] | None = None


class StudentAPIError(Exception):
    """Base exception for all Student API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status


# ─── Configuration Errors (fatal at startup) ────────────────────

class ConfigError(StudentAPIError):
    """Configuration could not be resolved, parsed or validated."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class ConfigPathMissingError(ConfigError):
    """Neither CONFIG_PATH nor -config named a config file."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "CONFIG_PATH is required (set the environment variable or pass -config)",
            "CONFIG_PATH_MISSING", context,
        )


class ConfigFileNotFoundError(ConfigError):
    """Resolved config path does not reference an existing file."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"Config file does not exist: {path}",
            "CONFIG_FILE_NOT_FOUND", context,
        )
        self.path = path


class ConfigInvalidError(ConfigError):
    """Config file unreadable, not YAML, or missing required values."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Error loading config file: {message}", "CONFIG_INVALID", context,
        )


# ─── Request Errors (400-level) ─────────────────────────────────

class RequestBodyError(StudentAPIError):
    """Request body could not be decoded into a student."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class EmptyBodyError(RequestBodyError):
    """Request body had no content."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__("request body is empty", "EMPTY_BODY", context)


class MalformedBodyError(RequestBodyError):
    """Request body is not valid JSON."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"request body is not valid JSON: {detail}", "MALFORMED_BODY", context,
        )


class SchemaMismatchError(RequestBodyError):
    """Request body is JSON but not a valid student object."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"request body does not match the student schema: {detail}",
            "SCHEMA_MISMATCH", context,
        )


# ─── Internal / Lifecycle Errors (500-level) ────────────────────

class EnvelopeEncodingError(StudentAPIError):
    """Response payload could not be serialized to JSON."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"response payload is not JSON serializable: {detail}",
            "ENVELOPE_ENCODING_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, context, 500,
        )


class ServerStartupError(StudentAPIError):
    """Listener could not be bound."""
    def __init__(self, address: str, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"failed to bind {address}: {detail}",
            "SERVER_STARTUP_FAILED", ErrorCategory.LIFECYCLE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.address = address


class ServerCrashedError(StudentAPIError):
    """Serve loop ended without a shutdown request."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"server stopped unexpectedly: {detail}",
            "SERVER_CRASHED", ErrorCategory.LIFECYCLE,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DrainTimeoutError(StudentAPIError):
    """In-flight requests outlived the shutdown grace period."""
    def __init__(self, timeout: float, pending: int, context: ErrorContext | None = None):
        super().__init__(
            f"graceful shutdown exceeded {timeout:g}s with {pending} request(s) still running",
            "DRAIN_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 500,
        )
        self.timeout = timeout
        self.pending = pending
