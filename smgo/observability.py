"""
Structured Logging with structlog

All smgo modules log through get_logger(__name__). Events are routed to the
stdlib logging module, so an application that never calls setup_logging
only sees warnings (on stderr, via logging's last-resort handler).
"""

import logging
import sys

import structlog
from structlog.contextvars import merge_contextvars


def setup_logging(level: str = "WARNING", format: str = "console") -> None:
    """
    Setup structured logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("json" for machines, "console" for humans)
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    # stderr: stdout carries the serialized trees
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )
    _configure_structlog(format)


def _configure_structlog(format: str) -> None:
    shared_processors = [
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if format == "json":
        output_processors = [
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=shared_processors + output_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.debug("go_parse_started", size=1024)
        ```
    """
    if not structlog.is_configured():
        _configure_structlog("console")
    return structlog.get_logger(name)
