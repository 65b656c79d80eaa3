"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog to render key/value log lines on stderr.

    Logs go to stderr so the report on stdout stays readable when piped.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams are honoured.
    return structlog.PrintLogger(file=sys.stderr)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger bound to the given module name."""
    return structlog.get_logger(name, **initial_values)
