"""
Unit tests for connection state value types.
"""

import dataclasses

import pytest

from chatlog.chat.connection_state import ConnectionSnapshot, ConnectionState, DisconnectReason, TerminalOutcome


def test_transient_reasons():
    transient = {r for r in DisconnectReason if r.is_transient}
    assert transient == {
        DisconnectReason.OPEN_FAILED,
        DisconnectReason.CLOSED,
        DisconnectReason.PROBE_TIMEOUT,
    }


def test_terminal_outcomes():
    fatal = TerminalOutcome.fatal_exit("boom")
    assert (fatal.reason, fatal.fatal, fatal.exit_code) == ("boom", True, 1)

    stopped = TerminalOutcome.stopped()
    assert stopped.fatal is False
    assert stopped.exit_code == 0


def test_snapshot_is_frozen():
    snapshot = ConnectionSnapshot(ConnectionState.IDLE, 0, 0, None, False)
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.generation = 1
