"""Split raw terminal input into complete key sequences.

One read from the tty may hold several key presses, or only the first half
of an escape sequence. Without buffering, a partial ``ESC [ A`` would be
read as Escape (quit) followed by ``[`` and ``A``. A lone ESC that nothing
follows within the timeout is emitted on its own, which is how the Escape
key itself gets through.
"""

from __future__ import annotations

import asyncio
from typing import Callable

ESC = "\x1b"


def _sequence_end(buffer: str, start: int) -> int | None:
    """Index just past the escape sequence at *start*, or ``None`` if cut off."""
    introducer = start + 1
    if introducer >= len(buffer):
        return None

    kind = buffer[introducer]
    if kind == "[":
        # CSI: parameters, then one final byte in 0x40-0x7e
        for pos in range(introducer + 1, len(buffer)):
            if 0x40 <= ord(buffer[pos]) <= 0x7E:
                return pos + 1
        return None
    if kind == "O":
        # SS3: exactly one more character
        return introducer + 2 if introducer + 1 < len(buffer) else None
    # meta: ESC plus one character
    return introducer + 1


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Return the complete sequences at the front of *buffer* and the rest."""
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue
        end = _sequence_end(buffer, pos)
        if end is None:
            break
        sequences.append(buffer[pos:end])
        pos = end
    return sequences, buffer[pos:]


class StdinBuffer:
    """Buffers input and hands each complete sequence to a callback.

    With no running event loop a trailing partial sequence is emitted at
    once; otherwise it waits *timeout* seconds for the rest to arrive.
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._pending = ""
        self._timeout = timeout
        self._timer: asyncio.TimerHandle | None = None
        self._callback: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        self._callback = callback

    def process(self, data: str) -> None:
        self._cancel_timer()

        sequences, self._pending = split_sequences(self._pending + data)
        for sequence in sequences:
            self._emit(sequence)

        if not self._pending:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._emit_pending()
        else:
            self._timer = loop.call_later(self._timeout, self._on_timeout)

    def flush(self) -> list[str]:
        """Drop and return whatever is still buffered."""
        self._cancel_timer()
        if not self._pending:
            return []
        pending, self._pending = self._pending, ""
        return [pending]

    def destroy(self) -> None:
        self._cancel_timer()
        self._pending = ""

    def _emit(self, sequence: str) -> None:
        if self._callback is not None:
            self._callback(sequence)

    def _emit_pending(self) -> None:
        for sequence in self.flush():
            self._emit(sequence)

    def _on_timeout(self) -> None:
        self._timer = None
        self._emit_pending()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
