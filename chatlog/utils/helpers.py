"""General utility helper functions."""

from __future__ import annotations

from datetime import datetime

__all__ = ["format_duration", "format_current_time"]


def format_duration(total_seconds: int | float | None) -> str:
    """Return a human-friendly Hh Mm Ss string for a duration in seconds.

    Examples:
      65 -> "1m 5s"
      3605 -> "1h 0m 5s"
      59 -> "59s"
    """
    if total_seconds is None:
        return "unknown"
    seconds = int(total_seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, sec = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {sec}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m {sec}s"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h {minutes}m {sec}s"


def format_current_time(now: datetime | None = None) -> str:
    """Local wall-clock time as zero-padded 24h ``HH:MM:SS``."""
    return (now or datetime.now()).strftime("%H:%M:%S")
