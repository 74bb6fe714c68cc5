"""Connection states, disconnect reasons and terminal outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConnectionState(Enum):
    """Enumeration of connection lifecycle states."""

    IDLE = "idle"
    CONNECTING = "connecting"
    HANDSHAKING = "handshaking"
    JOINED = "joined"
    CLOSING = "closing"
    FAULTED = "faulted"


class DisconnectReason(Enum):
    """Why a single connection ended; decides the next lifecycle step."""

    OPEN_FAILED = "open_failed"
    CLOSED = "closed"
    PROBE_TIMEOUT = "probe_timeout"
    AUTH_FAILED = "auth_failed"
    SUPERSEDED = "superseded"
    SHUTDOWN = "shutdown"

    @property
    def is_transient(self) -> bool:
        return self in (
            DisconnectReason.OPEN_FAILED,
            DisconnectReason.CLOSED,
            DisconnectReason.PROBE_TIMEOUT,
        )


@dataclass(frozen=True)
class ConnectionSnapshot:
    """Read-only view of the current connection for health reporting."""

    state: ConnectionState
    generation: int
    attempt_count: int
    last_probe_sent_at: float | None
    awaiting_probe_reply: bool


@dataclass(frozen=True)
class TerminalOutcome:
    """Final result of ``ConnectionLifecycleManager.run``.

    The manager never exits the process itself; the owner maps this to an
    exit status.
    """

    reason: str
    fatal: bool
    exit_code: int

    @classmethod
    def fatal_exit(cls, reason: str) -> TerminalOutcome:
        return cls(reason=reason, fatal=True, exit_code=1)

    @classmethod
    def stopped(cls) -> TerminalOutcome:
        return cls(reason="shutdown requested", fatal=False, exit_code=0)
