"""Centralized internal error hierarchy.

These exceptions provide semantic categories for retry logic and higher-level
error handling. Raw aiohttp / JSON errors are wrapped in one of these before
they reach retry code.

Classes:
  InternalError        : Base for all internal errors.
  NetworkError         : Transient network/IO issues (safe to retry).
  OAuthError           : Authentication / authorization related failures.
  ParsingError         : Response parsing / schema validation issues.
  RateLimitError       : Explicit rate limiting signalled by remote service.
  ConfigError          : Invalid or missing startup configuration.
  CredentialLoadError  : Persisted credential missing or unreadable.
  CredentialRefreshError : Refresh failed definitively or retries exhausted.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    This includes issues such as connection timeouts, resets, HTTP 5xx
    responses or other transient failures that may be retried.
    """


class OAuthError(InternalError):
    """Exception raised for OAuth authentication or authorization failures.

    These errors indicate a rejected refresh token or client credentials and
    are never retried automatically.
    """


class ParsingError(InternalError):
    """Exception raised for response parsing or schema validation errors."""


class RateLimitError(InternalError):
    """Exception raised when the remote service signals rate limiting."""

    def __init__(self, message: str = "Rate limited", *, retry_after: float | None = None):
        super().__init__(message, data={"retry_after": retry_after})
        self.retry_after = retry_after


class ConfigError(InternalError):
    """Startup configuration is missing or invalid."""


class CredentialLoadError(InternalError):
    """The persisted credential could not be read or validated."""


class CredentialRefreshError(InternalError):
    """A credential refresh failed and will not be attempted again."""


__all__ = [
    "InternalError",
    "NetworkError",
    "OAuthError",
    "ParsingError",
    "RateLimitError",
    "ConfigError",
    "CredentialLoadError",
    "CredentialRefreshError",
]
