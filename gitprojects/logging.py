"""Structured logging configuration — structlog + stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os
from typing import Optional

import structlog


def setup_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """Configure structlog and stdlib logging.

    Explicit arguments win over the environment:
        GITPROJECTS_LOG_LEVEL  — log level (default: WARNING)
        GITPROJECTS_LOG_FORMAT — console | json (default: console)

    Logs go to stderr; stdout is reserved for scan output.
    """
    log_level = (level or os.environ.get("GITPROJECTS_LOG_LEVEL", "WARNING")).upper()
    if json_format is None:
        json_format = os.environ.get("GITPROJECTS_LOG_FORMAT", "console").lower() == "json"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": log_level,
            },
            "loggers": {
                "gitprojects": {"level": log_level},
            },
        }
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger writing through the stdlib logger ``name``.

    Before setup_logging() runs, events take stdlib logging's defaults:
    WARNING and above on stderr, nothing on stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
