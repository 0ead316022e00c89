"""Full-screen rendering of the session.

Screen layout, top to bottom:

* row 0 - prompt and the command being edited
* row 1 - the one-shot error message, in red
* row 2 - a border line
* row 3 and below - the text buffer, one source line per row

Lines are cut at the screen width; there is no soft wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from txtmanip.line_editor import LineEditorView
from txtmanip.terminal import Terminal
from txtmanip.utils import (
    iter_runes,
    sanitize_line,
    truncate_runes_to_width,
    truncate_to_width,
)

INPUT_ROW = 0
ERROR_ROW = 1
BORDER_ROW = 2
TEXT_ROW = 3

BORDER_CHAR = "-"

_RED = "\x1b[31m"
_RESET_FG = "\x1b[39m"
_HOME = "\x1b[H"
_CLEAR_TO_EOL = "\x1b[K"
_CLEAR_TO_EOS = "\x1b[J"
_MOVE_FMT = "\x1b[{};{}H"


@dataclass(frozen=True)
class Frame:
    lines: list[str]
    cursor_row: int
    cursor_column: int


class Renderer(Protocol):
    def draw(self, editor: LineEditorView, content: bytes) -> None: ...


def _input_line(view: LineEditorView, width: int) -> str:
    text = "".join(rune for rune, _ in iter_runes(view.content))
    return truncate_runes_to_width(view.prompt + sanitize_line(text), width)


def _error_line(message: str, width: int) -> str:
    flat = " ".join(sanitize_line(line) for line in message.splitlines() if line.strip())
    return truncate_to_width(flat, width)


def text_lines(content: bytes) -> list[str]:
    """Split buffer content at literal newlines for display."""
    text = content.decode("utf-8", errors="replace")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [sanitize_line(line) for line in lines]


def render_frame(view: LineEditorView, content: bytes, width: int, height: int) -> Frame:
    """Lay out one full screen without touching any terminal."""
    width = max(width, 1)
    lines = [
        _input_line(view, width),
        _error_line(view.error, width),
        BORDER_CHAR * width,
    ]

    available = max(height - TEXT_ROW, 0)
    for line in text_lines(content)[:available]:
        lines.append(truncate_to_width(line, width))

    return Frame(
        lines=lines[: max(height, TEXT_ROW)],
        cursor_row=INPUT_ROW,
        cursor_column=min(view.cursor_column, width - 1),
    )


class TerminalRenderer:
    """Draws frames onto a :class:`Terminal`, repainting the whole screen."""

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal

    def draw(self, editor: LineEditorView, content: bytes) -> None:
        frame = render_frame(editor, content, self._terminal.columns, self._terminal.rows)

        out: list[str] = [_HOME]
        for row, line in enumerate(frame.lines):
            if row == ERROR_ROW and line:
                line = _RED + line + _RESET_FG
            out.append(line + _CLEAR_TO_EOL)
            out.append("\r\n" if row < len(frame.lines) - 1 else "")
        out.append(_CLEAR_TO_EOS)
        out.append(_MOVE_FMT.format(frame.cursor_row + 1, frame.cursor_column + 1))

        self._terminal.hide_cursor()
        self._terminal.write("".join(out))
        self._terminal.show_cursor()
