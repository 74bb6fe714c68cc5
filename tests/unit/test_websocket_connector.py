"""
Unit tests for WebSocketConnector.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
import websockets
from websockets.protocol import State

from chatlog.chat.websocket_connector import WebSocketConnector
from chatlog.errors.chat import ChatConnectionError


class FakeWebSocket:
    """Minimal ClientConnection: iterates scripted frames, then ends or errors."""

    def __init__(self, frames, error=None):
        self.frames = list(frames)
        self.error = error
        self.state = State.OPEN
        self.close_code = 1000
        self.close_reason = ""
        self.send = AsyncMock()
        self.close = AsyncMock()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame
        if self.error:
            raise self.error


class TestWebSocketConnector:
    """Test class for WebSocketConnector functionality."""

    def setup_method(self):
        self.connector = WebSocketConnector("wss://irc.example:443")

    def test_init_sets_attributes(self):
        assert self.connector.ws_url == "wss://irc.example:443"
        assert self.connector.ws is None
        assert self.connector.is_open is False

    @pytest.mark.asyncio
    async def test_connect_success(self):
        mock_ws = FakeWebSocket([])

        with patch("websockets.connect", new_callable=AsyncMock) as mock_connect, \
             patch("chatlog.chat.websocket_connector.logging") as mock_logging:
            mock_connect.return_value = mock_ws
            await self.connector.connect()

        assert self.connector.ws is mock_ws
        assert self.connector.is_open
        mock_connect.assert_called_once()
        args, kwargs = mock_connect.call_args
        assert args == ("wss://irc.example:443",)
        assert kwargs["ping_interval"] is None
        mock_logging.info.assert_called_once()

    @pytest.mark.asyncio
    async def test_connect_raises_chat_error_on_failure(self):
        with patch("websockets.connect", new_callable=AsyncMock) as mock_connect:
            mock_connect.side_effect = OSError("Connection refused")

            with pytest.raises(ChatConnectionError) as exc_info:
                await self.connector.connect()

        assert "WebSocket connection failed" in str(exc_info.value)
        assert exc_info.value.operation_type == "connect"
        assert self.connector.ws is None

    @pytest.mark.asyncio
    async def test_connect_closes_previous_socket(self):
        old = FakeWebSocket([])
        self.connector.ws = old

        with patch("websockets.connect", new_callable=AsyncMock) as mock_connect:
            mock_connect.return_value = FakeWebSocket([])
            await self.connector.connect()

        old.close.assert_awaited_once_with(code=1000)

    @pytest.mark.asyncio
    async def test_send_when_not_connected(self):
        with pytest.raises(ChatConnectionError) as exc_info:
            await self.connector.send("PING")
        assert exc_info.value.operation_type == "send"

    @pytest.mark.asyncio
    async def test_send_forwards_text(self):
        self.connector.ws = FakeWebSocket([])
        await self.connector.send("NICK bot")
        self.connector.ws.send.assert_awaited_once_with("NICK bot")

    @pytest.mark.asyncio
    async def test_send_on_closed_connection(self):
        ws = FakeWebSocket([])
        ws.send.side_effect = websockets.ConnectionClosedError(None, None)
        self.connector.ws = ws

        with pytest.raises(ChatConnectionError):
            await self.connector.send("PING")

    @pytest.mark.asyncio
    async def test_messages_decodes_bytes_and_ends_on_clean_close(self):
        self.connector.ws = FakeWebSocket(["PING :tmi.twitch.tv\r\n", b"hello\r\n"])

        with patch("chatlog.chat.websocket_connector.logging") as mock_logging:
            frames = [frame async for frame in self.connector.messages()]

        assert frames == ["PING :tmi.twitch.tv\r\n", "hello\r\n"]
        mock_logging.info.assert_called_once()

    @pytest.mark.asyncio
    async def test_messages_abnormal_close_raises(self):
        self.connector.ws = FakeWebSocket(
            ["a"], error=websockets.ConnectionClosedError(None, None)
        )

        frames = []
        with pytest.raises(ChatConnectionError) as exc_info:
            async for frame in self.connector.messages():
                frames.append(frame)

        assert frames == ["a"]
        assert exc_info.value.operation_type == "receive"

    @pytest.mark.asyncio
    async def test_close_closes_open_connection(self):
        ws = FakeWebSocket([])
        self.connector.ws = ws

        await self.connector.close()

        ws.close.assert_awaited_once_with(code=1000)
        assert self.connector.ws is None

    @pytest.mark.asyncio
    async def test_close_skips_already_closed(self):
        ws = FakeWebSocket([])
        ws.state = State.CLOSED
        self.connector.ws = ws

        await self.connector.close()

        ws.close.assert_not_awaited()
        assert self.connector.ws is None

    @pytest.mark.asyncio
    async def test_close_swallows_close_error(self):
        ws = FakeWebSocket([])
        ws.close.side_effect = RuntimeError("boom")
        self.connector.ws = ws

        with patch("chatlog.chat.websocket_connector.logging") as mock_logging:
            await self.connector.close()

        mock_logging.warning.assert_called_once()
        assert self.connector.ws is None

    def test_is_open_reflects_state(self):
        ws = Mock()
        ws.state = State.CLOSING
        self.connector.ws = ws
        assert self.connector.is_open is False
