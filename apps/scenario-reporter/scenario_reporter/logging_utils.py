"""Structured logging setup for scenario-reporter."""

from __future__ import annotations

import logging
import sys

import structlog

from .output_config import LogFormat


def configure_logging(log_level: str, log_format: LogFormat = "console") -> structlog.stdlib.BoundLogger:
    """Configure structlog; log lines go to stderr so reports on stdout stay clean."""

    normalized_level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=normalized_level,
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    elif log_format == "plain":
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:  # json
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(normalized_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("scenario_reporter")
