from __future__ import annotations

from ..logging_config import log_structured_error
from .chat import ChatError
from .internal import (
    ConfigError,
    CredentialLoadError,
    CredentialRefreshError,
    InternalError,
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitError,
)


def classify_error(error: BaseException) -> str:
    """Map an exception to the short category used in structured logs."""
    if isinstance(error, NetworkError | ChatError | OSError | ConnectionError):
        return "network"
    if isinstance(error, OAuthError | CredentialRefreshError):
        return "auth"
    if isinstance(error, RateLimitError):
        return "ratelimit"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, ConfigError | CredentialLoadError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(message: str, error: Exception, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    This function formats and logs an error message along with the string
    representation of the exception using structured logging.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
    )
