"""Client-initiated PING/PONG keepalive for half-open connection detection."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from ..constants import KEEPALIVE_INTERVAL_SECONDS, KEEPALIVE_TIMEOUT_SECONDS
from ..errors.chat import ChatConnectionError
from .irc_lines import PROBE_MARKER


class LivenessMonitor:
    """Sends a probe every ``interval`` seconds and waits ``timeout`` for the reply.

    Policy is strict: only an explicit probe reply (``acknowledge``) clears a
    pending probe, ordinary chat traffic does not. Reply and timeout are the
    two outcomes of a single ``wait_for`` so exactly one of them happens per
    probe. After declaring the connection dead the monitor stops itself.

    One monitor belongs to one connection; ``stop`` cancels its task so no
    stale timeout can fire after the connection is torn down.

    Attributes:
        interval (float): Seconds between probes.
        timeout (float): Seconds to wait for a probe reply.
        last_probe_sent_at (float | None): Monotonic time of the last probe.
        awaiting_reply (bool): Whether a probe is outstanding.
    """

    def __init__(
        self,
        send: Callable[[str], Awaitable[None]],
        is_open: Callable[[], bool],
        on_dead: Callable[[str], None],
        *,
        interval: float = KEEPALIVE_INTERVAL_SECONDS,
        timeout: float = KEEPALIVE_TIMEOUT_SECONDS,
    ) -> None:
        self._send = send
        self._is_open = is_open
        self._on_dead = on_dead
        self.interval = interval
        self.timeout = timeout
        self.last_probe_sent_at: float | None = None
        self.awaiting_reply = False
        self._reply = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="liveness-monitor")

    async def stop(self) -> None:
        task = self._task
        self._task = None
        self.awaiting_reply = False
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def acknowledge(self) -> None:
        """Record a probe reply from the server."""
        if self.awaiting_reply:
            self._reply.set()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not self._is_open():
                continue
            if not await self._probe():
                return

    async def _probe(self) -> bool:
        self._reply.clear()
        self.awaiting_reply = True
        self.last_probe_sent_at = time.monotonic()
        try:
            await self._send(PROBE_MARKER)
        except ChatConnectionError as e:
            self.awaiting_reply = False
            logging.warning(f"⚠️ Sending PING failed: {e}")
            self._on_dead("probe send failed")
            return False
        logging.debug("🏓 PING sent")
        try:
            await asyncio.wait_for(self._reply.wait(), timeout=self.timeout)
        except TimeoutError:
            self.awaiting_reply = False
            logging.error(
                f"⏱️ No response to PING within {self.timeout:g}s, connection considered dead"
            )
            self._on_dead("probe timeout")
            return False
        self.awaiting_reply = False
        logging.debug("🏓 PONG received")
        return True
