"""
Structured logging utilities for postmeta.

Log events are structlog key/value events, rendered as JSON lines or as
human-readable console output.
"""

import logging
import sys
from typing import IO, Any, Dict, Optional

import structlog


def setup_logging(
    level: str = "INFO", structured: bool = True, stream: Optional[IO[str]] = None
) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        structured: Whether to render events as JSON lines.
        stream: Where to write events. Defaults to stderr so that stdout
            stays free for command output.

    Raises:
        ValueError: If the log level is invalid.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if structured:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Get a logger bound to the given name.

    Args:
        name: Logger name, usually ``__name__``.

    Returns:
        A lazy structlog logger whose events carry a ``logger_name`` key.
    """
    return structlog.get_logger(name, logger_name=name)


def log_with_context(
    logger: Any,
    level: str,
    event: str,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an event with additional key/value context.

    Args:
        logger: Logger instance.
        level: Log level (debug, info, warning, error, critical).
        event: Event name or message.
        extra: Additional context to include in the event.
    """
    log_method = getattr(logger, level.lower())
    log_method(event, **(extra or {}))
