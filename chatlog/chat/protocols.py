"""Protocol definitions for chat components.

This module defines Protocol interfaces using typing.Protocol for the
collaborators of the connection lifecycle manager, so tests can substitute
in-memory fakes for the WebSocket, the token provider and stdout.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from ..auth_token.types import Credential


class TransportProtocol(Protocol):
    """Bidirectional text message stream to a fixed endpoint."""

    @property
    def is_open(self) -> bool:
        """Check if the stream is open for sending."""
        ...

    async def connect(self) -> None:
        """Open the stream. Raises ChatConnectionError on failure."""
        ...

    async def send(self, text: str) -> None:
        """Send one text message. Raises ChatConnectionError on failure."""
        ...

    def messages(self) -> AsyncIterator[str]:
        """Iterate inbound text messages until the stream closes.

        Ends normally on a clean close and raises ChatConnectionError on an
        abnormal one.
        """
        ...

    async def close(self) -> None:
        """Close the stream. Never raises."""
        ...


class CredentialProviderProtocol(Protocol):
    """Source of the current bearer credential."""

    def current_credential(self) -> Credential:
        """Return the latest known credential."""
        ...

    async def refresh(self) -> Credential:
        """Refresh and persist the credential. Raises CredentialRefreshError."""
        ...


class LineSinkProtocol(Protocol):
    """Consumer of application chat lines."""

    def emit(self, line: str) -> None:
        """Output one inbound line."""
        ...
