"""structlog setup for the processposter CLI and library callers.

Log events are written to stderr. stdout carries command results only, so
``processposter post --json`` can be piped into another tool.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from processposter.config import settings


def _level_number(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    level: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog from LOG_LEVEL and LOG_FORMAT.

    Arguments override the settings. Unknown level names fall back to INFO;
    any format other than ``json`` renders for humans, in colour only when
    the stream is a terminal.
    """
    stream = stream or sys.stderr
    log_format = log_format or settings.log_format

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _level_number(level or settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=True,
    )
