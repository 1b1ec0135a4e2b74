"""Structured Logging - JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (method, path, error_code, signal, state) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging() owns exactly one root handler; calling it again replaces it

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - uvicorn runs with log_config=None so its records reach the same handler
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "method", "path", "status_code", "error_code", "signal", "state",
    "address", "env", "storage_path", "config_path", "debug_info",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _StudentAPIHandler(logging.StreamHandler):
    """Marker type so setup_logging can find its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging for the application."""
    for existing in list(logging.root.handlers):
        if isinstance(existing, _StudentAPIHandler):
            logging.root.removeHandler(existing)

    handler = _StudentAPIHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
