"""Connection lifecycle manager for the Twitch IRC-over-WebSocket gateway.

This module owns the connect -> handshake -> stream -> detect failure ->
recover loop. Exactly one transport exists at a time; every failure episode
ends in exactly one decision (backoff reconnect, credential refresh, or a
terminal outcome), made in ``run``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from functools import partial

from ..constants import (
    AUTH_FAILURE_MAX_CONSECUTIVE,
    KEEPALIVE_INTERVAL_SECONDS,
    KEEPALIVE_TIMEOUT_SECONDS,
    TWITCH_IRC_WS_URL,
)
from ..errors.chat import ChatConnectionError
from ..errors.handling import log_error
from ..errors.internal import CredentialRefreshError
from .connection_state import (
    ConnectionSnapshot,
    ConnectionState,
    DisconnectReason,
    TerminalOutcome,
)
from .irc_lines import (
    handshake_lines,
    is_auth_failure,
    is_probe,
    is_probe_reply,
    normalize_channel,
    probe_reply_for,
    split_frame,
)
from .liveness_monitor import LivenessMonitor
from .protocols import CredentialProviderProtocol, LineSinkProtocol, TransportProtocol
from .reconnection_manager import ReconnectPolicy
from .websocket_connector import WebSocketConnector


class ConnectionLifecycleManager:
    """Keeps one authenticated chat connection alive indefinitely.

    External code only calls ``run``, ``connect``, ``shutdown`` and
    ``snapshot``; the transport is never exposed.

    Attributes:
        nick (str): Account nickname sent in the handshake.
        channels (tuple[str, ...]): Channels joined, in join order.
        ws_url (str): Chat gateway endpoint.
        policy (ReconnectPolicy): Backoff state for the current outage.
        state (ConnectionState): Current lifecycle state.
    """

    def __init__(
        self,
        nick: str,
        channels: Iterable[str],
        credentials: CredentialProviderProtocol,
        sink: LineSinkProtocol,
        *,
        ws_url: str = TWITCH_IRC_WS_URL,
        connector_factory: Callable[[str], TransportProtocol] = WebSocketConnector,
        policy: ReconnectPolicy | None = None,
        keepalive_interval: float = KEEPALIVE_INTERVAL_SECONDS,
        keepalive_timeout: float = KEEPALIVE_TIMEOUT_SECONDS,
        max_auth_failures: int | None = AUTH_FAILURE_MAX_CONSECUTIVE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.nick = nick.strip().lower()
        self.channels = tuple(dict.fromkeys(normalize_channel(c) for c in channels if c.strip()))
        if not self.channels:
            raise ValueError("at least one channel is required")
        self.ws_url = ws_url
        self.policy = policy or ReconnectPolicy()
        self.state = ConnectionState.IDLE

        self._credentials = credentials
        self._sink = sink
        self._connector_factory = connector_factory
        self._keepalive_interval = keepalive_interval
        self._keepalive_timeout = keepalive_timeout
        self._max_auth_failures = max_auth_failures
        self._sleep = sleep

        self._generation = 0
        self._connector: TransportProtocol | None = None
        self._monitor: LivenessMonitor | None = None
        self._listener: asyncio.Task[DisconnectReason] | None = None
        self._dead_event: asyncio.Event | None = None
        self._consecutive_auth_failures = 0
        self._connect_requested = asyncio.Event()
        self._stop_event = asyncio.Event()
        self._running = False

    # Public operations -------------------------------------------------

    async def run(self) -> TerminalOutcome:
        """Connect and keep the session alive until a terminal outcome.

        Returns:
            TerminalOutcome: ``fatal`` for exhausted reconnects, an
            unrecoverable authentication failure or a failed refresh;
            non-fatal after ``shutdown``.
        """
        if self._running:
            raise RuntimeError("ConnectionLifecycleManager is already running")
        self._running = True
        try:
            while not self._stop_event.is_set():
                reason = await self._run_connection()
                outcome = await self._decide(reason)
                if outcome is not None:
                    return outcome
            return TerminalOutcome.stopped()
        finally:
            await self._teardown()
            self._running = False

    def connect(self) -> None:
        """Request a fresh connection, tearing down the current one first."""
        self._connect_requested.set()

    def shutdown(self) -> None:
        """Request a graceful stop; ``run`` returns once torn down."""
        self._stop_event.set()

    def snapshot(self) -> ConnectionSnapshot:
        monitor = self._monitor
        return ConnectionSnapshot(
            state=self.state,
            generation=self._generation,
            attempt_count=self.policy.attempt_count,
            last_probe_sent_at=monitor.last_probe_sent_at if monitor else None,
            awaiting_probe_reply=monitor.awaiting_reply if monitor else False,
        )

    # Connection lifetime ----------------------------------------------

    async def _run_connection(self) -> DisconnectReason:
        """Drive one connection from open to teardown and report why it ended."""
        await self._teardown()
        self._connect_requested.clear()
        self._generation += 1
        generation = self._generation

        self.state = ConnectionState.CONNECTING
        connector = self._connector_factory(self.ws_url)
        self._connector = connector
        try:
            await connector.connect()
        except ChatConnectionError as e:
            logging.error(f"❌ WebSocket error: {e}")
            await self._teardown()
            return DisconnectReason.OPEN_FAILED

        self.state = ConnectionState.HANDSHAKING
        try:
            await self._handshake(connector)
        except ChatConnectionError as e:
            logging.error(f"❌ Handshake failed: {e}")
            await self._teardown()
            return DisconnectReason.CLOSED

        self.state = ConnectionState.JOINED
        self.policy.reset()
        dead = asyncio.Event()
        self._dead_event = dead
        self._monitor = LivenessMonitor(
            connector.send,
            lambda: connector.is_open,
            partial(self._on_connection_dead, generation),
            interval=self._keepalive_interval,
            timeout=self._keepalive_timeout,
        )
        self._monitor.start()
        listener = asyncio.create_task(self._listen(connector), name=f"chat-listener-{generation}")
        self._listener = listener

        waiters = [
            asyncio.create_task(dead.wait()),
            asyncio.create_task(self._connect_requested.wait()),
            asyncio.create_task(self._stop_event.wait()),
        ]
        try:
            await asyncio.wait([listener, *waiters], return_when=asyncio.FIRST_COMPLETED)
            reason = self._disconnect_reason(listener, dead)
        finally:
            for waiter in waiters:
                waiter.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)
            await self._teardown()
        return reason

    def _disconnect_reason(
        self, listener: asyncio.Task[DisconnectReason], dead: asyncio.Event
    ) -> DisconnectReason:
        if self._stop_event.is_set():
            return DisconnectReason.SHUTDOWN
        if listener.done():
            return listener.result()
        if dead.is_set():
            return DisconnectReason.PROBE_TIMEOUT
        return DisconnectReason.SUPERSEDED

    async def _handshake(self, connector: TransportProtocol) -> None:
        credential = self._credentials.current_credential()
        for line in handshake_lines(credential.access_token, self.nick, self.channels):
            await connector.send(line)
        logging.info(
            f"✅ Connected to Twitch IRC as {self.nick}, joining {', '.join('#' + c for c in self.channels)}"
        )

    async def _listen(self, connector: TransportProtocol) -> DisconnectReason:
        try:
            async for frame in connector.messages():
                for line in split_frame(frame):
                    if await self._dispatch_line(connector, line):
                        return DisconnectReason.AUTH_FAILED
        except ChatConnectionError as e:
            logging.warning(f"⚠️ {e}")
        return DisconnectReason.CLOSED

    async def _dispatch_line(self, connector: TransportProtocol, line: str) -> bool:
        """Handle one inbound line; True means authentication was rejected."""
        if is_probe_reply(line):
            if self._monitor:
                self._monitor.acknowledge()
            return False
        if is_probe(line):
            try:
                await connector.send(probe_reply_for(line))
            except ChatConnectionError as e:
                # The read side reports the closure
                logging.warning(f"⚠️ Could not answer PING: {e}")
            return False
        self._sink.emit(line)
        return is_auth_failure(line)

    def _on_connection_dead(self, generation: int, why: str) -> None:
        if generation != self._generation or self._dead_event is None:
            logging.debug(f"Ignoring stale liveness signal generation={generation} why={why}")
            return
        logging.warning(f"💔 Connection declared dead ({why})")
        self._dead_event.set()

    async def _teardown(self) -> None:
        """Stop monitor, detach line handling and close the transport."""
        if self._monitor is None and self._listener is None and self._connector is None:
            return
        self.state = ConnectionState.CLOSING
        monitor, self._monitor = self._monitor, None
        if monitor:
            await monitor.stop()
        self._dead_event = None
        listener, self._listener = self._listener, None
        if listener and not listener.done():
            listener.cancel()
            try:
                await listener
            except asyncio.CancelledError:
                pass
        connector, self._connector = self._connector, None
        if connector:
            await connector.close()
        self.state = ConnectionState.IDLE

    # Recovery decisions -----------------------------------------------

    async def _decide(self, reason: DisconnectReason) -> TerminalOutcome | None:
        """Pick the next step after a connection ended; None means reconnect."""
        if reason is DisconnectReason.SHUTDOWN:
            return TerminalOutcome.stopped()
        if reason is DisconnectReason.AUTH_FAILED:
            return await self._recover_credentials()
        if not reason.is_transient:
            logging.info("🔁 New connection requested, replacing the current one")
            return None

        self.state = ConnectionState.FAULTED
        if reason is not DisconnectReason.OPEN_FAILED:
            self._consecutive_auth_failures = 0
        delay = self.policy.next_delay()
        if delay is None:
            message = "Maximum reconnection attempts exceeded"
            logging.critical(f"💀 {message}. Exiting...")
            return TerminalOutcome.fatal_exit(message)
        logging.warning(
            f"🔄 {self._describe(reason)}. Reconnecting in {delay:g} seconds "
            f"(attempt {self.policy.attempt_count}/{self.policy.max_attempts})..."
        )
        # A connect() request cuts the backoff short
        await self._race_stop(asyncio.ensure_future(self._sleep(delay)), self._connect_requested)
        if self._stop_event.is_set():
            return TerminalOutcome.stopped()
        return None

    async def _recover_credentials(self) -> TerminalOutcome | None:
        self.state = ConnectionState.FAULTED
        self._consecutive_auth_failures += 1
        logging.error("🔐 Authentication failed. Token might be expired or invalid.")
        # Refresh-then-rejected cycles are capped; None refreshes on every rejection
        cap = self._max_auth_failures
        if cap is not None and self._consecutive_auth_failures > cap:
            message = "Authentication keeps failing after token refresh"
            logging.critical(f"💀 {message}. Exiting...")
            return TerminalOutcome.fatal_exit(message)
        refresh = asyncio.ensure_future(self._credentials.refresh())
        await self._race_stop(refresh)
        if self._stop_event.is_set():
            return TerminalOutcome.stopped()
        try:
            refresh.result()
        except CredentialRefreshError as e:
            log_error("Error refreshing token", e)
            return TerminalOutcome.fatal_exit(f"Token refresh failed: {e}")
        logging.info("🔑 Token refreshed. Reconnecting...")
        return None

    async def _race_stop(self, work: asyncio.Future, *events: asyncio.Event) -> None:
        """Wait for ``work`` or the first of shutdown and ``events``.

        ``work`` is cancelled if it has not finished by then.
        """
        watchers = [asyncio.create_task(e.wait()) for e in (self._stop_event, *events)]
        try:
            await asyncio.wait([work, *watchers], return_when=asyncio.FIRST_COMPLETED)
        finally:
            for watcher in watchers:
                watcher.cancel()
            await asyncio.gather(*watchers, return_exceptions=True)
            if not work.done():
                work.cancel()
                await asyncio.gather(work, return_exceptions=True)

    @staticmethod
    def _describe(reason: DisconnectReason) -> str:
        if reason is DisconnectReason.OPEN_FAILED:
            return "Connection attempt failed"
        if reason is DisconnectReason.PROBE_TIMEOUT:
            return "No response to PING"
        return "Connection closed"
