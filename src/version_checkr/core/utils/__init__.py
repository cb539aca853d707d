"""
Shared utilities for logging and timeout handling.
"""

from version_checkr.core.utils.logging import configure_logging, log_operation
from version_checkr.core.utils.timeout import execute_with_timeout

__all__ = [
    "configure_logging",
    "log_operation",
    "execute_with_timeout",
]
