"""Structured logging setup shared by the engine and the API process."""

from __future__ import annotations

import logging
from typing import Any

import structlog

from cropmatch.config import settings

_configured = False


def configure_logging() -> None:
    """Configure stdlib + structlog once per process."""
    global _configured
    if _configured:
        return

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if settings.log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
        logging.basicConfig(level=log_level, format="%(message)s")
    else:
        renderer = structlog.dev.ConsoleRenderer()
        logging.basicConfig(level=log_level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True
