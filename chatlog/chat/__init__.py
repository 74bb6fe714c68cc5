"""Chat connection lifecycle & exports."""

from .connection_state import (
    ConnectionSnapshot,
    ConnectionState,
    DisconnectReason,
    TerminalOutcome,
)
from .lifecycle_manager import ConnectionLifecycleManager
from .line_sink import LineSink
from .liveness_monitor import LivenessMonitor
from .reconnection_manager import ReconnectPolicy, backoff_delay
from .websocket_connector import WebSocketConnector

__all__ = [
    "ConnectionLifecycleManager",
    "ConnectionSnapshot",
    "ConnectionState",
    "DisconnectReason",
    "TerminalOutcome",
    "LineSink",
    "LivenessMonitor",
    "ReconnectPolicy",
    "backoff_delay",
    "WebSocketConnector",
]
