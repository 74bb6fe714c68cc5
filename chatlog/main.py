#!/usr/bin/env python3
"""
Main entry point for the Twitch chat logger
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

import aiohttp

from .auth_token import (
    Credential,
    CredentialProvider,
    StaticCredentialProvider,
    TokenClient,
    TokenStore,
)
from .chat import ConnectionLifecycleManager, LineSink, ReconnectPolicy, TerminalOutcome
from .config import AuthMode, SessionConfig, parse_args
from .errors.handling import log_error
from .errors.internal import ConfigError, CredentialLoadError
from .logging_config import LoggerConfigurator


def build_provider(
    config: SessionConfig, session: aiohttp.ClientSession
) -> CredentialProvider | StaticCredentialProvider:
    """Create the credential provider for the configured auth mode.

    Raises:
        CredentialLoadError: If the token file cannot be loaded.
    """
    if config.auth_mode is AuthMode.STATIC:
        return StaticCredentialProvider(Credential.static(config.oauth_token or ""))
    client = TokenClient(config.client_id or "", config.client_secret or "", session)
    return CredentialProvider.from_store(client, TokenStore(config.token_file))


def install_signal_handlers(manager: ConnectionLifecycleManager) -> None:  # pragma: no cover
    """Translate SIGINT/SIGTERM into a graceful manager shutdown."""
    loop = asyncio.get_running_loop()

    def handler(signum: int) -> None:
        logging.warning(f"🛑 Signal received - initiating shutdown (signal={signum})")
        manager.shutdown()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, handler, sig)
        except (NotImplementedError, RuntimeError):
            # Windows event loops lack add_signal_handler; KeyboardInterrupt still stops us
            pass


async def main(argv: list[str] | None = None) -> int:
    """Parse arguments, connect and log chat until a terminal outcome.

    Returns:
        int: Process exit status.
    """
    LoggerConfigurator().configure()
    try:
        config = parse_args(argv)
    except ConfigError as e:
        log_error("Configuration error", e)
        return 1
    if config.debug:
        LoggerConfigurator({"debug": True}).configure()

    async with aiohttp.ClientSession() as session:
        try:
            provider = build_provider(config, session)
        except CredentialLoadError as e:
            log_error("Error reading tokens", e)
            logging.critical("💀 Failed to read tokens. Exiting...")
            return 1

        manager = ConnectionLifecycleManager(
            config.nick,
            config.channels,
            provider,
            LineSink(),
            ws_url=config.ws_url,
            policy=ReconnectPolicy(max_attempts=config.max_attempts),
        )
        install_signal_handlers(manager)
        try:
            outcome: TerminalOutcome = await manager.run()
        finally:
            await provider.aclose()

    if outcome.fatal:
        logging.critical(f"💀 {outcome.reason}")
    else:
        logging.info("✅ Shutdown complete")
    return outcome.exit_code


def run() -> None:
    """Synchronous entry point for the application.

    Raises:
        SystemExit: Always, with the exit status of ``main``.
    """
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    run()
