"""Retry utilities for asynchronous operations using Tenacity."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Exception raised when all retry attempts have been exhausted."""

    def __init__(self, message: str, attempts: int, final_exception: BaseException | None = None) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.final_exception = final_exception


async def retry_async(
    operation: Callable[[int], Awaitable[T]],
    *,
    retry_on: tuple[type[BaseException], ...],
    max_attempts: int = 6,
    multiplier: float = 2.0,
    max_wait: float = 60.0,
    context: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Retry an asynchronous operation with exponential backoff using Tenacity.

    Exceptions listed in ``retry_on`` trigger another attempt after
    ``multiplier * 2^(n-1)`` seconds (capped at ``max_wait``); any other
    exception propagates immediately.

    Args:
        operation: Async callable that takes the 1-based attempt number.
        retry_on: Exception types considered transient.
        max_attempts: Maximum number of attempts.
        multiplier: Wait before the first retry.
        max_wait: Upper bound for a single wait.
        context: Human readable label for log lines.
        sleep: Awaitable sleep used between attempts.

    Returns:
        The result from operation if successful.

    Raises:
        RetryExhaustedError: If all attempts are exhausted.
    """
    attempt_count = 0

    def before_attempt(retry_state: RetryCallState) -> None:
        nonlocal attempt_count
        attempt_count = retry_state.attempt_number

    def before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logging.warning(
            f"🔁 {context} failed (attempt {retry_state.attempt_number}/{max_attempts}), "
            f"retrying in {wait:.0f} seconds: {type(exc).__name__}: {exc}"
        )

    async def wrapped_operation() -> T:
        return await operation(attempt_count)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        before=before_attempt,
        before_sleep=before_sleep,
        sleep=sleep,
    )

    try:
        return await retrying(wrapped_operation)
    except RetryError as e:
        final = e.last_attempt.exception()
        raise RetryExhaustedError(
            f"{context} failed after {max_attempts} attempts",
            attempts=max_attempts,
            final_exception=final,
        ) from final
