"""Structured Logging: JSON formatter, setup, and loop-level fault logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (method, path, status_code, error_code, error_category,
      severity, operation, budget_id, state, duration_ms) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency
    - setup_logging called once on startup via lifespan; repeated calls do not
      stack handlers
"""

import asyncio
import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "method", "path", "status_code", "error_code", "error_category",
    "severity", "operation", "budget_id", "state", "duration_ms",
)

_HANDLER_NAME = "budget_gateway"

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """asyncio exception handler: log faults from stray tasks, keep serving."""
    exc = context.get("exception")
    logger.error(
        f"Unhandled error in event loop: {context.get('message', exc)}",
        exc_info=exc,
    )
