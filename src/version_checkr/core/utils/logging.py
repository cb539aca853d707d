"""
Structured logging utilities.

Configures structlog on top of the standard library and provides a context
manager for timed operation logging.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog

from version_checkr.core.config.logging_config import LoggingConfig

logger = structlog.get_logger()


def configure_logging(logging_config: LoggingConfig) -> None:
    """
    Configure stdlib logging and structlog for the process.

    Safe to call more than once; later calls replace the earlier configuration.
    """
    level = getattr(logging, logging_config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=logging_config.format, force=True)

    renderer: Any = (
        structlog.processors.JSONRenderer() if logging_config.render_json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def log_operation(operation: str, **context: Any) -> AsyncIterator[None]:
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        **context: Additional context to include in logs

    Example:
        async with log_operation("version_check", repo=repo, sha=sha):
            result = await check(...)
    """
    start_time = time.time()
    log = logger.bind(operation=operation, **context)
    log.info("operation_started")

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        log.error("operation_failed", error=str(e), latency_ms=latency_ms, exc_info=True)
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        log.info("operation_completed", latency_ms=latency_ms)
