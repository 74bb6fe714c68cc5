"""Utility functions package for the chat logger.

Exposed functions:
    format_duration: Formats time durations into human-readable strings.
    format_current_time: Local ``HH:MM:SS`` timestamp used as output prefix.
    retry_async: Tenacity-backed retry for async operations.
"""

from .helpers import format_current_time, format_duration
from .retry import RetryExhaustedError, retry_async

__all__ = [
    "format_duration",
    "format_current_time",
    "retry_async",
    "RetryExhaustedError",
]
