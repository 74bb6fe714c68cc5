"""Reconnect policy: exponential backoff bounded by an attempt budget."""

from __future__ import annotations

from ..constants import (
    RECONNECT_BASE_DELAY_SECONDS,
    RECONNECT_MAX_ATTEMPTS,
    RECONNECT_MAX_BACKOFF_SECONDS,
)


def backoff_delay(
    attempt: int,
    base_unit: float = RECONNECT_BASE_DELAY_SECONDS,
    max_delay: float | None = RECONNECT_MAX_BACKOFF_SECONDS,
) -> float:
    """Delay before reconnect attempt ``attempt``: ``2^attempt * base_unit``.

    Capped at ``max_delay`` unless it is None.
    """
    if attempt < 0:
        raise ValueError("attempt must be non-negative")
    if max_delay is not None and base_unit > 0:
        # Avoid building 2**99 sized floats when the cap is already exceeded
        if attempt >= 64 or (2**attempt) * base_unit >= max_delay:
            return float(max_delay)
    return float((2**attempt) * base_unit)


class ReconnectPolicy:
    """Backoff state for one outage episode.

    The counter increments each time a reconnect is scheduled and is reset
    only by a fully successful handshake, so delays never shrink while the
    outage lasts.

    Attributes:
        max_attempts (int): Reconnects allowed per episode before giving up.
        base_unit (float): Seconds multiplied by ``2^attempt``.
        max_delay (float | None): Cap for a single delay.
        attempt_count (int): Reconnects scheduled in the current episode.
    """

    def __init__(
        self,
        max_attempts: int = RECONNECT_MAX_ATTEMPTS,
        base_unit: float = RECONNECT_BASE_DELAY_SECONDS,
        max_delay: float | None = RECONNECT_MAX_BACKOFF_SECONDS,
    ) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be non-negative")
        self.max_attempts = max_attempts
        self.base_unit = base_unit
        self.max_delay = max_delay
        self.attempt_count = 0

    @property
    def exhausted(self) -> bool:
        return self.attempt_count >= self.max_attempts

    def next_delay(self) -> float | None:
        """Schedule the next reconnect.

        Returns:
            float | None: Seconds to wait, or None when the budget is spent.
        """
        if self.exhausted:
            return None
        self.attempt_count += 1
        return backoff_delay(self.attempt_count, self.base_unit, self.max_delay)

    def reset(self) -> None:
        self.attempt_count = 0
