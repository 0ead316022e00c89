"""In-memory terminals for tests.

``VirtualTerminal`` satisfies the ``txtmanip.terminal.Terminal`` protocol,
records every write, and lets a test push key input and resizes through the
handlers the session registered.
"""

from __future__ import annotations

from typing import Callable


class VirtualTerminal:
    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self.rows = rows
        self.columns = columns
        self.writes: list[str] = []
        self.cursor_visible = True
        self.stop_count = 0
        self._on_input: Callable[[str], None] | None = None
        self._on_resize: Callable[[], None] | None = None

    @property
    def started(self) -> bool:
        return self._on_input is not None

    @property
    def output(self) -> str:
        return "".join(self.writes)

    def start(self, on_input: Callable[[str], None], on_resize: Callable[[], None]) -> None:
        self._on_input = on_input
        self._on_resize = on_resize

    def stop(self) -> None:
        self.stop_count += 1
        self._on_input = None
        self._on_resize = None

    def write(self, data: str) -> None:
        self.writes.append(data)

    def hide_cursor(self) -> None:
        self.cursor_visible = False
        self.write("\x1b[?25l")

    def show_cursor(self) -> None:
        self.cursor_visible = True
        self.write("\x1b[?25h")

    def clear_screen(self) -> None:
        self.write("\x1b[2J\x1b[H")

    def clear_buffer(self) -> None:
        self.writes.clear()

    def simulate_input(self, data: str) -> None:
        """Deliver *data* as one key sequence. The terminal must be started."""
        if self._on_input is None:
            raise RuntimeError("terminal not started")
        self._on_input(data)

    def simulate_resize(self, rows: int | None = None, columns: int | None = None) -> None:
        self.rows = rows if rows is not None else self.rows
        self.columns = columns if columns is not None else self.columns
        if self._on_resize is not None:
            self._on_resize()


class ScriptedTerminal(VirtualTerminal):
    """Plays a fixed list of key sequences as soon as the session starts it."""

    def __init__(self, script: list[str], rows: int = 24, columns: int = 80) -> None:
        super().__init__(rows=rows, columns=columns)
        self.script = list(script)

    def start(self, on_input: Callable[[str], None], on_resize: Callable[[], None]) -> None:
        super().start(on_input, on_resize)
        for data in self.script:
            self.simulate_input(data)
