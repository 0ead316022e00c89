"""Terminal access for the interactive session.

``Terminal`` is the interface the renderer and session driver depend on.
``ProcessTerminal`` implements it on ``/dev/tty`` rather than on the standard
streams: standard input may be carrying the source text and standard output
is reserved for the replay line.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import termios
import tty
from typing import Callable, Protocol

from txtmanip.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"
WRITE_LOG_ENV = "TXTMANIP_WRITE_LOG"

DEFAULT_SIZE = os.terminal_size((80, 24))

_ENTER_ALT_SCREEN = "\x1b[?1049h"
_LEAVE_ALT_SCREEN = "\x1b[?1049l"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"


class Terminal(Protocol):
    """What the session needs from a terminal."""

    def start(self, on_input: Callable[[str], None], on_resize: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_screen(self) -> None: ...


class ProcessTerminal:
    """The controlling tty in raw mode on the alternate screen.

    Key data and SIGWINCH are delivered through the running asyncio loop,
    so :meth:`start` and :meth:`stop` must be called from inside it.
    """

    def __init__(self, path: str = TTY_PATH) -> None:
        self._path = path
        self._fd: int | None = None
        self._saved_mode: list | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._on_input: Callable[[str], None] | None = None
        self._on_resize: Callable[[], None] | None = None
        self._keys = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._write_log = os.environ.get(WRITE_LOG_ENV, "")

    @property
    def columns(self) -> int:
        return self._size().columns

    @property
    def rows(self) -> int:
        return self._size().lines

    def start(self, on_input: Callable[[str], None], on_resize: Callable[[], None]) -> None:
        """Take over the tty.

        Raises :class:`OSError` when there is no controlling terminal.
        """
        self._on_input = on_input
        self._on_resize = on_resize

        fd = os.open(self._path, os.O_RDWR | os.O_NOCTTY)
        self._fd = fd
        self._saved_mode = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._send(_ENTER_ALT_SCREEN)

        self._keys = StdinBuffer()
        self._keys.on_data(self._deliver)
        self._decoder.reset()

        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(fd, self._read_keys)
        self._loop.add_signal_handler(signal.SIGWINCH, self._resized)
        logger.debug("Terminal started on %s", self._path)

    def stop(self) -> None:
        """Give the tty back in the state it was found. Safe to call twice."""
        self._keys.destroy()
        self._on_input = None
        self._on_resize = None

        if self._loop is not None:
            if self._fd is not None:
                self._loop.remove_reader(self._fd)
            self._loop.remove_signal_handler(signal.SIGWINCH)
            self._loop = None

        if self._fd is None:
            return
        self._send(_SHOW_CURSOR + _LEAVE_ALT_SCREEN)
        if self._saved_mode is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None
        os.close(self._fd)
        self._fd = None
        logger.debug("Terminal stopped")

    def write(self, data: str) -> None:
        self._send(data)
        if self._write_log:
            # debug aid only; a broken log path must not break drawing
            try:
                with open(self._write_log, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                logger.debug("Cannot append to %s", self._write_log)

    def hide_cursor(self) -> None:
        self._send(_HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._send(_SHOW_CURSOR)

    def clear_screen(self) -> None:
        self._send(_CLEAR_SCREEN)

    def _size(self) -> os.terminal_size:
        if self._fd is None:
            return DEFAULT_SIZE
        try:
            return os.get_terminal_size(self._fd)
        except OSError:
            return DEFAULT_SIZE

    def _read_keys(self) -> None:
        if self._fd is None:
            return
        try:
            raw = os.read(self._fd, 4096)
        except OSError:
            return
        text = self._decoder.decode(raw)
        if text:
            self._keys.process(text)

    def _deliver(self, sequence: str) -> None:
        if self._on_input is not None:
            self._on_input(sequence)

    def _resized(self) -> None:
        if self._on_resize is not None:
            self._on_resize()

    def _send(self, data: str) -> None:
        if self._fd is None:
            return
        view = memoryview(data.encode("utf-8"))
        while view:
            written = os.write(self._fd, view)
            view = view[written:]
