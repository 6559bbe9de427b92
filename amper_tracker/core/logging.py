"""Logging setup and the request event log used by handlers and services."""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from amper_tracker.core.config import settings

_CONTEXT_KEYS = (
    "event",
    "username",
    "product_id",
    "sensor",
    "time_range",
    "count",
    "reason",
    "status_code",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Appends the request context carried in ``extra`` as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}"
            for key in _CONTEXT_KEYS
            if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message


def configure_logging(level: str | int | None = None) -> None:
    """Configure application-wide logging with contextual formatting."""
    global _configured
    if _configured:
        return

    log_level = level if level is not None else settings.LOG_LEVEL

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "amper_tracker.core.logging.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True


class EventLog:
    """Structured event emitter handed to request handlers.

    Each call is a single log record whose context travels in ``extra`` so
    the formatter (or any other handler) can pick it up field by field.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("amper_tracker.events")

    def emit(self, event: str, **context: Any) -> None:
        self.logger.info(event, extra={"event": event, **context})

    def failure(self, event: str, exc: BaseException, **context: Any) -> None:
        self.logger.error(
            "%s: %s", event, exc, exc_info=exc, extra={"event": event, **context}
        )


def get_event_log() -> EventLog:
    """Dependency providing the event log collaborator."""
    return EventLog()
