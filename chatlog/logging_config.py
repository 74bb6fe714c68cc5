r"""
Logging configuration module for the Twitch chat logger.

Operational events go to stderr through colorlog with the same ``HH:MM:SS``
prefix used for chat lines on stdout, so both streams line up when a terminal
interleaves them.
"""

import logging
import os
import sys
from typing import Any

import colorlog

TIME_FORMAT = "%H:%M:%S"


def log_structured_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with a category tag, exception summary and context.

    Args:
        error_type: Category of the error (e.g., 'network', 'auth', 'config')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception:
        structured_message += f" | Exception: {type(exception).__name__}: {str(exception)}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.log(level, structured_message)


LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def build_formatter() -> colorlog.ColoredFormatter:
    """Level-colored formatter; error and critical messages are colored too."""
    return colorlog.ColoredFormatter(
        "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
        datefmt=TIME_FORMAT,
        log_colors=LEVEL_COLORS,
        secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
        reset=True,
    )


class LoggerConfigurator:
    """Installs a single colored stderr handler on the root logger.

    Safe to call again (e.g. once arguments enabled ``--debug``); the previous
    handler is replaced.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict; ``{"debug": True}`` forces DEBUG level.
        """
        self.config = config or {}

    def configure(self):
        """Configure logging with colored output using colorlog.

        Uses environment variables:
        - DEBUG: 'true', '1' or 'yes' selects DEBUG, as does ``config["debug"]``
        """
        debug_env = os.environ.get("DEBUG", "").lower()
        debug = self.config.get("debug") or debug_env in ("true", "1", "yes")
        log_level = logging.DEBUG if debug else logging.INFO

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(build_formatter())

        logging.basicConfig(
            level=log_level,
            handlers=[handler],
            format="%(message)s",
            force=True,
        )

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Frame-level websockets debug output drowns the chat log
        logging.getLogger("websockets").setLevel(logging.INFO)
        logging.getLogger("asyncio").setLevel(logging.WARNING)
