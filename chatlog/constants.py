"""
Configuration constants for the Twitch chat logger

This module contains all configurable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Endpoints
TWITCH_IRC_WS_URL = os.getenv("TWITCH_IRC_WS_URL", "wss://irc-ws.chat.twitch.tv:443")
TWITCH_TOKEN_URL = os.getenv("TWITCH_TOKEN_URL", "https://id.twitch.tv/oauth2/token")
DEFAULT_TOKEN_FILE = os.getenv("TWITCH_TOKEN_FILE", "./twitch-tokens.json")

# Keepalive (application level PING/PONG)
KEEPALIVE_INTERVAL_SECONDS = _get_env_float(
    "KEEPALIVE_INTERVAL_SECONDS", 300.0
)  # Seconds between client PING probes (5 min default)
KEEPALIVE_TIMEOUT_SECONDS = _get_env_float(
    "KEEPALIVE_TIMEOUT_SECONDS", 10.0
)  # Seconds to wait for PONG before declaring the connection dead

# Reconnect/backoff constants
RECONNECT_MAX_ATTEMPTS = _get_env_int(
    "RECONNECT_MAX_ATTEMPTS", 100
)  # Reconnect attempts per outage before giving up
RECONNECT_BASE_DELAY_SECONDS = _get_env_float(
    "RECONNECT_BASE_DELAY_SECONDS", 1.0
)  # Unit multiplied by 2^attempt
RECONNECT_MAX_BACKOFF_SECONDS = _get_env_float(
    "RECONNECT_MAX_BACKOFF_SECONDS", 300.0
)  # Upper bound for a single reconnect delay

# Network/HTTP constants
HTTP_REQUEST_TIMEOUT_SECONDS = _get_env_int(
    "HTTP_REQUEST_TIMEOUT_SECONDS", 30
)  # Default HTTP request timeout
WEBSOCKET_OPEN_TIMEOUT_SECONDS = _get_env_float(
    "WEBSOCKET_OPEN_TIMEOUT_SECONDS", 10.0
)  # WebSocket opening handshake timeout
WEBSOCKET_CLOSE_TIMEOUT_SECONDS = _get_env_float(
    "WEBSOCKET_CLOSE_TIMEOUT_SECONDS", 5.0
)  # WebSocket closing handshake timeout

# Token refresh retry constants
TOKEN_REFRESH_MAX_ATTEMPTS = _get_env_int(
    "TOKEN_REFRESH_MAX_ATTEMPTS", 10
)  # Attempts per refresh before the refresh is considered failed
RETRY_BACKOFF_MULTIPLIER = _get_env_float(
    "RETRY_BACKOFF_MULTIPLIER", 2.0
)  # First retry waits this long, doubling afterwards
RETRY_MAX_BACKOFF_SECONDS = _get_env_float(
    "RETRY_MAX_BACKOFF_SECONDS", 60.0
)  # Maximum backoff time in seconds
AUTH_FAILURE_MAX_CONSECUTIVE = _get_env_int(
    "AUTH_FAILURE_MAX_CONSECUTIVE", 3
)  # Refresh-and-reconnect cycles allowed while every login is still rejected
