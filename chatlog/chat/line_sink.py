"""Timestamped stdout printer for chat lines."""

from __future__ import annotations

import sys
from typing import TextIO

from ..utils.helpers import format_current_time


class LineSink:
    """Prints each inbound line as ``HH:MM:SS <line>``.

    Trailing whitespace is stripped so CRLF terminated frames do not produce
    blank lines.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, line: str) -> None:
        stream = self._stream or sys.stdout
        print(f"{format_current_time()} {line.rstrip()}", file=stream, flush=True)
