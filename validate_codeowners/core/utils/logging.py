"""
Structured logging utilities.

Provides logging setup for the command-line run and a context manager for
structured operation logging with timing and error tracking.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def configure_logging(debug: bool = False, fmt: str | None = None) -> None:
    """
    Route stdlib and structlog output to stdout at INFO, or DEBUG when requested.

    Args:
        debug: Enable very verbose debug logging.
        fmt: Optional stdlib log format string.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=fmt or "%(asctime)s %(levelname)8s %(message)s",
        stream=sys.stdout,
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@asynccontextmanager
async def log_operation(operation: str, **context: Any) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        **context: Additional context to include in logs

    Example:
        async with log_operation("membership_check", project=project_path):
            result = await reconcile(...)
    """
    start_time = time.time()
    logger.debug("operation_started", operation=operation, **context)

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.error("operation_failed", operation=operation, error=str(e), latency_ms=latency_ms, **context)
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug("operation_completed", operation=operation, latency_ms=latency_ms, **context)
