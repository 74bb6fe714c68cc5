"""IRC line helpers for the Twitch chat gateway.

Only the handshake commands and the PING/PONG liveness exchange are
understood; every other line is opaque text.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

PROBE_MARKER = "PING"
PROBE_REPLY_MARKER = "PONG"

# Substrings Twitch sends in a NOTICE when PASS is rejected
AUTH_FAILURE_INDICATORS: tuple[str, ...] = (
    "Login authentication failed",
    "Improperly formatted auth",
)

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_frame(frame: str) -> list[str]:
    """Split one WebSocket frame into IRC lines, dropping empty fragments.

    Twitch may batch several ``\\r\\n`` terminated lines into a single frame.
    Only line terminators are removed; other whitespace is preserved.
    """
    return [line for line in _LINE_SPLIT_RE.split(frame) if line]


def is_probe(line: str) -> bool:
    return line.startswith(PROBE_MARKER)


def is_probe_reply(line: str) -> bool:
    """True for ``PONG ...`` and the server-prefixed ``:tmi.twitch.tv PONG ...`` form."""
    if line.startswith(PROBE_REPLY_MARKER):
        return True
    if line.startswith(":"):
        parts = line.split(" ", 2)
        return len(parts) > 1 and parts[1] == PROBE_REPLY_MARKER
    return False


def probe_reply_for(line: str) -> str:
    """Answer a server PING by swapping the leading marker for PONG.

    ``PING :tmi.twitch.tv`` -> ``PONG :tmi.twitch.tv``; the payload after the
    marker is echoed unchanged.
    """
    if not is_probe(line):
        raise ValueError(f"not a probe line: {line!r}")
    return PROBE_REPLY_MARKER + line[len(PROBE_MARKER) :]


def is_auth_failure(line: str) -> bool:
    return any(indicator in line for indicator in AUTH_FAILURE_INDICATORS)


def normalize_channel(channel: str) -> str:
    return channel.strip().lstrip("#").lower()


def handshake_lines(access_token: str, nick: str, channels: Iterable[str]) -> list[str]:
    """Build the handshake: credential, identity, then one JOIN per channel."""
    lines = [f"PASS oauth:{access_token}", f"NICK {nick}"]
    lines.extend(f"JOIN #{normalize_channel(channel)}" for channel in channels)
    return lines
