"""Error hierarchy for transport, credential and configuration failures."""

from .chat import ChatConnectionError, ChatError
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

__all__ = [
    "ChatError",
    "ChatConnectionError",
    "InternalError",
    "NetworkError",
    "OAuthError",
    "ParsingError",
    "RateLimitError",
    "ConfigError",
    "CredentialLoadError",
    "CredentialRefreshError",
]
