"""
In-memory stand-ins for the lifecycle manager's collaborators.

FakeTransport matches the connector surface (connect/send/messages/close)
exactly, so the manager runs unmodified against it.
"""

import asyncio
from collections.abc import Callable

from chatlog.auth_token.types import Credential
from chatlog.errors.chat import ChatConnectionError

_CLOSED = object()


class FakeTransport:
    """Scriptable transport; frames are fed by the test."""

    def __init__(
        self,
        url: str,
        index: int,
        events: list[tuple[str, int]],
        *,
        fail_connect: bool = False,
        on_send: Callable[["FakeTransport", str], None] | None = None,
    ):
        self.url = url
        self.index = index
        self.events = events
        self.fail_connect = fail_connect
        self.on_send = on_send
        self.sent: list[str] = []
        self.opened = False
        self.closed = False
        self._inbox: asyncio.Queue = asyncio.Queue()

    @property
    def is_open(self) -> bool:
        return self.opened and not self.closed

    async def connect(self) -> None:
        if self.fail_connect:
            raise ChatConnectionError("connection refused", operation_type="connect")
        self.opened = True
        self.events.append(("open", self.index))

    async def send(self, text: str) -> None:
        if not self.is_open:
            raise ChatConnectionError("WebSocket not connected", operation_type="send")
        self.sent.append(text)
        if self.on_send:
            self.on_send(self, text)

    async def messages(self):
        while True:
            item = await self._inbox.get()
            if item is _CLOSED:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.events.append(("close", self.index))

    # Test controls
    def feed(self, frame: str) -> None:
        self._inbox.put_nowait(frame)

    def drop(self) -> None:
        """Server closes the socket cleanly."""
        self._inbox.put_nowait(_CLOSED)

    def fail(self, message: str = "connection reset") -> None:
        self._inbox.put_nowait(ChatConnectionError(message, operation_type="receive"))

    @property
    def handshake_done(self) -> bool:
        return any(line.startswith("JOIN") for line in self.sent)


class TransportFactory:
    """Creates FakeTransports and remembers them in creation order.

    ``fail_connect_from`` makes every transport with that index or later
    refuse to open; ``on_send`` is attached to every transport.
    """

    def __init__(
        self,
        *,
        fail_connect_from: int | None = None,
        on_send: Callable[[FakeTransport, str], None] | None = None,
    ):
        self.created: list[FakeTransport] = []
        self.events: list[tuple[str, int]] = []
        self.fail_connect_from = fail_connect_from
        self.on_send = on_send

    def __call__(self, url: str) -> FakeTransport:
        index = len(self.created)
        fail = self.fail_connect_from is not None and index >= self.fail_connect_from
        transport = FakeTransport(
            url, index, self.events, fail_connect=fail, on_send=self.on_send
        )
        self.created.append(transport)
        return transport

    @property
    def latest(self) -> FakeTransport:
        return self.created[-1]


class RecordingSink:
    def __init__(self):
        self.lines: list[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)


class FakeCredentialProvider:
    """Refreshes to ``new-<n>`` tokens, or raises ``error`` when given."""

    def __init__(self, credential: Credential, *, error: Exception | None = None):
        self.credential = credential
        self.error = error
        self.refresh_calls = 0

    def current_credential(self) -> Credential:
        return self.credential

    async def refresh(self) -> Credential:
        self.refresh_calls += 1
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        self.credential = Credential(
            access_token=f"new-{self.refresh_calls}", refresh_token="refresh"
        )
        return self.credential


class RecordingSleep:
    """Records requested delays; ``block`` makes every sleep wait forever."""

    def __init__(self, block: bool = False):
        self.delays: list[float] = []
        self.block = block

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self.block:
            await asyncio.Event().wait()
        await asyncio.sleep(0)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.005)
