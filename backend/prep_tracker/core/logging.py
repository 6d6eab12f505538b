"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from prep_tracker.core.context import get_request_id

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s"

# Chatty third-party loggers stay at WARNING unless the app runs at DEBUG.
QUIET_LIBRARIES = ("sqlalchemy.engine", "apscheduler", "uvicorn.access", "httpx", "opik")


class RequestIdFilter(logging.Filter):
    """Stamp every record with the active request id ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def build_logging_config(log_level: str) -> Dict[str, Any]:
    level = log_level.upper()
    library_level = "DEBUG" if level == "DEBUG" else "WARNING"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
                "filters": ["request_id"],
            }
        },
        "loggers": {
            "prep_tracker": {"level": level},
            **{name: {"level": library_level} for name in QUIET_LIBRARIES},
        },
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Configure application logging once per process."""
    if getattr(configure_logging, "_configured", False):
        return

    dictConfig(build_logging_config(log_level))
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    setattr(configure_logging, "_configured", True)
