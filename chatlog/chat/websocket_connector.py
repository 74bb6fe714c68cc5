"""WebSocket Connector for basic connection establishment and cleanup."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import websockets
from websockets.protocol import State

from ..constants import (
    TWITCH_IRC_WS_URL,
    WEBSOCKET_CLOSE_TIMEOUT_SECONDS,
    WEBSOCKET_OPEN_TIMEOUT_SECONDS,
)
from ..errors.chat import ChatConnectionError

WEBSOCKET_NOT_CONNECTED_ERROR = "WebSocket not connected"


class WebSocketConnector:
    """Handles WebSocket connection establishment, text I/O and cleanup.

    One connector wraps one WebSocket. The lifecycle manager creates a fresh
    connector for every connection attempt and never reuses a closed one.

    Attributes:
        ws_url (str): WebSocket URL.
        ws (websockets.ClientConnection | None): Active WebSocket connection.
    """

    def __init__(self, ws_url: str = TWITCH_IRC_WS_URL) -> None:
        """Initialize the WebSocket Connector.

        Args:
            ws_url (str): WebSocket URL of the chat gateway.
        """
        self.ws_url = ws_url
        self.ws = None

    @property
    def is_open(self) -> bool:
        return self.ws is not None and self.ws.state is State.OPEN

    async def connect(self) -> None:
        """Open the WebSocket.

        Raises:
            ChatConnectionError: If the connection cannot be established.
        """
        logging.debug(f"🔌 Connecting to WebSocket at {self.ws_url}")
        await self._cleanup_connection()
        try:
            # Keepalive is done with IRC PING/PONG, not WebSocket control frames
            self.ws = await websockets.connect(
                self.ws_url,
                ping_interval=None,
                open_timeout=WEBSOCKET_OPEN_TIMEOUT_SECONDS,
                close_timeout=WEBSOCKET_CLOSE_TIMEOUT_SECONDS,
            )
        except Exception as e:
            raise ChatConnectionError(
                f"WebSocket connection failed: {str(e)}", operation_type="connect"
            ) from e
        logging.info(f"🔌 Connected to {self.ws_url}")

    async def send(self, text: str) -> None:
        """Send a text frame.

        Raises:
            ChatConnectionError: If not connected or the send fails.
        """
        if not self.is_open:
            raise ChatConnectionError(WEBSOCKET_NOT_CONNECTED_ERROR, operation_type="send")
        try:
            await self.ws.send(text)
        except websockets.ConnectionClosed as e:
            raise ChatConnectionError(
                f"WebSocket send failed: {str(e)}", operation_type="send"
            ) from e

    async def messages(self) -> AsyncIterator[str]:
        """Yield inbound frames as text until the WebSocket closes.

        Raises:
            ChatConnectionError: On abnormal closure.
        """
        if self.ws is None:
            raise ChatConnectionError(WEBSOCKET_NOT_CONNECTED_ERROR, operation_type="receive")
        try:
            async for message in self.ws:
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                yield message
        except websockets.ConnectionClosedError as e:
            raise ChatConnectionError(
                f"WebSocket closed: {str(e)}", operation_type="receive"
            ) from e
        logging.info(f"🔌 WebSocket closed: {self._describe_close()}")

    async def close(self) -> None:
        """Close the WebSocket gracefully."""
        await self._cleanup_connection()

    def _describe_close(self) -> str:
        if self.ws is None:
            return "no connection"
        code = getattr(self.ws, "close_code", None)
        reason = getattr(self.ws, "close_reason", None)
        return f"code={code}, reason={reason or '-'}"

    async def _cleanup_connection(self) -> None:
        """Clean up the current WebSocket connection and resources."""
        if self.ws is None:
            return
        if self.ws.state is State.CLOSED:
            logging.debug(f"🔌 WebSocket already closed: {self._describe_close()}")
        else:
            try:
                await self.ws.close(code=1000)
                logging.debug(f"🔌 WebSocket disconnected: {self._describe_close()}")
            except Exception as e:
                logging.warning(f"⚠️ WebSocket close error: {str(e)}")
        self.ws = None
