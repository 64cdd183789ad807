"""Centralized structlog configuration for the rule editor."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    json_output: bool = False,
    log_level: str = "INFO",
    include_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the application.

    Call once at startup, typically from a CLI entry point. Logs go to
    stderr by default so generated source written to stdout stays clean.

    Args:
        json_output: If True, output JSON logs. If False, use colored
                    console output (development).
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        include_timestamp: Include ISO timestamp in logs.
        stream: Where log lines are written (default: sys.stderr).
    """
    stream = stream or sys.stderr
    level = getattr(logging, log_level.upper())

    # Route stdlib logging (httpx, google-genai) to the same stream
    logging.basicConfig(format="%(message)s", stream=stream, level=level)

    processors: list = [
        structlog.stdlib.add_log_level,
        # Merge context vars (run_id)
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=stream.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        A bound structlog logger that will include context vars.

    Example:
        logger = get_logger(__name__)
        logger.info("fetch_started", url=url)
    """
    return structlog.get_logger(name)
