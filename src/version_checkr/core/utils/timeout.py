"""
Timeout utilities for async operations.

Bounds calls to external collaborators; the version check core never blocks.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


async def execute_with_timeout(
    awaitable: Awaitable[T],
    timeout: float = 30.0,
    timeout_message: str | None = None,
) -> T:
    """
    Await an operation with timeout handling.

    Args:
        awaitable: The coroutine or future to await
        timeout: Timeout in seconds
        timeout_message: Custom message for timeout exception

    Returns:
        The result of the operation

    Raises:
        TimeoutError: If the operation times out
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as err:
        msg = timeout_message or f"Operation timed out after {timeout} seconds"
        logger.error("operation_timed_out", detail=msg, timeout=timeout)
        raise TimeoutError(msg) from err
