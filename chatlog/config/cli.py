"""Command line surface."""

from __future__ import annotations

import argparse

from pydantic import ValidationError

from ..constants import DEFAULT_TOKEN_FILE, RECONNECT_MAX_ATTEMPTS, TWITCH_IRC_WS_URL
from ..errors.internal import ConfigError
from .model import AuthMode, SessionConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatlog",
        description="Log Twitch chat channels to stdout over IRC-over-WebSocket.",
    )
    parser.add_argument(
        "--token-file",
        default=DEFAULT_TOKEN_FILE,
        help=f"token file for refresh mode (default: {DEFAULT_TOKEN_FILE})",
    )
    parser.add_argument(
        "--url", dest="ws_url", default=TWITCH_IRC_WS_URL, help="chat gateway WebSocket URL"
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=RECONNECT_MAX_ATTEMPTS,
        help=f"reconnect attempts per outage before exiting (default: {RECONNECT_MAX_ATTEMPTS})",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")

    modes = parser.add_subparsers(dest="auth_mode", required=True, metavar="MODE")

    refresh = modes.add_parser(
        AuthMode.REFRESH.value,
        help="tokens from the token file, refreshed with client credentials",
    )
    refresh.add_argument("client_id")
    refresh.add_argument("client_secret")
    refresh.add_argument("nick")
    refresh.add_argument("channels", nargs="+", metavar="channel")

    static = modes.add_parser(
        AuthMode.STATIC.value, help="static OAuth token; exits if it is rejected"
    )
    static.add_argument("oauth_token")
    static.add_argument("nick")
    static.add_argument("channels", nargs="+", metavar="channel")
    return parser


def parse_args(argv: list[str] | None = None) -> SessionConfig:
    """Parse command line arguments into a validated session config.

    Missing positional arguments make argparse print usage to stderr and
    raise ``SystemExit(2)`` before anything connects.

    Raises:
        ConfigError: If the arguments parse but do not validate.
    """
    args = build_parser().parse_args(argv)
    try:
        return SessionConfig.model_validate(vars(args))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid arguments: {problems}") from e
