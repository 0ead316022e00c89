"""Line editor - single-line command input over raw UTF-8 bytes."""

from __future__ import annotations

from dataclasses import dataclass, replace

from txtmanip.utils import bytes_width, decode_last_rune, decode_rune, rune_width, visible_width

PROMPT = "txtmanip> "


@dataclass(frozen=True)
class Cursor:
    """A position on the input line as both a display column and a byte offset.

    ``origin`` is the column where content starts (the prompt width). Both
    coordinates only ever change together through :meth:`forward`,
    :meth:`backward` and the constructors below.
    """

    origin: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"byte offset must not be negative: {self.offset}")
        if self.column < self.origin:
            raise ValueError(f"column {self.column} is left of origin {self.origin}")

    @classmethod
    def at_start(cls, origin: int) -> Cursor:
        return cls(origin=origin, column=origin, offset=0)

    @classmethod
    def at_end(cls, origin: int, content: bytes) -> Cursor:
        return cls(origin=origin, column=origin + bytes_width(content), offset=len(content))

    @property
    def relative_column(self) -> int:
        return self.column - self.origin

    def forward(self, width: int, size: int) -> Cursor:
        return replace(self, column=self.column + width, offset=self.offset + size)

    def backward(self, width: int, size: int) -> Cursor:
        return replace(self, column=self.column - width, offset=self.offset - size)


@dataclass(frozen=True)
class LineEditorView:
    """Read-only snapshot handed to the renderer."""

    prompt: str
    content: bytes
    cursor_column: int
    error: str


class LineEditor:
    """Single-line input with a UTF-8 aware cursor and submission history.

    Content is kept as bytes. Every edit keeps the cursor on a rune
    boundary; boundary operations (deleting on empty input, stepping past
    either end, browsing past the oldest entry) are silent no-ops.
    """

    def __init__(self, prompt: str = PROMPT) -> None:
        self._prompt = prompt
        self._origin = visible_width(prompt)
        self._content: bytes = b""
        self._cursor = Cursor.at_start(self._origin)
        self._error: str = ""
        self._history: list[str] = []
        self._history_index: int = 0

    # -- accessors ----------------------------------------------------------

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def content(self) -> bytes:
        return self._content

    @property
    def text(self) -> str:
        return self._content.decode("utf-8", errors="replace")

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def cursor_column(self) -> int:
        return self._cursor.column

    @property
    def cursor_byte_offset(self) -> int:
        return self._cursor.offset

    @property
    def error(self) -> str:
        return self._error

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def is_browsing_history(self) -> bool:
        return self._history_index < len(self._history)

    def is_empty(self) -> bool:
        return not self._content

    def _at_end(self) -> bool:
        return self._cursor.offset >= len(self._content)

    # -- editing ------------------------------------------------------------

    def insert(self, rune: str) -> None:
        """Insert *rune* at the cursor without moving the cursor."""
        encoded = rune.encode("utf-8")
        if self._at_end():
            self._content += encoded
            return

        offset = self._cursor.offset
        self._content = self._content[:offset] + encoded + self._content[offset:]

    def delete_at_cursor(self) -> None:
        """Remove the rune under the cursor."""
        if not self._content or self._at_end():
            return

        offset = self._cursor.offset
        _, size = decode_rune(self._content, offset)
        self._content = self._content[:offset] + self._content[offset + size :]

    def clear(self) -> None:
        self._content = b""
        self._cursor = Cursor.at_start(self._origin)

    def set_error(self, message: str) -> None:
        self._error = message

    # -- cursor movement ----------------------------------------------------

    def move_to_start(self) -> None:
        self._cursor = Cursor.at_start(self._origin)

    def move_to_end(self) -> None:
        self._cursor = Cursor.at_end(self._origin, self._content)

    def step_forward(self) -> bool:
        """Move one rune right. Returns ``False`` at the end of content."""
        if self._at_end():
            return False

        rune, size = decode_rune(self._content, self._cursor.offset)
        self._cursor = self._cursor.forward(rune_width(rune), size)
        return True

    def step_backward(self) -> bool:
        """Move one rune left. Returns ``False`` at the start of content."""
        if self._cursor.offset == 0:
            return False

        rune, size = decode_last_rune(self._content, self._cursor.offset)
        self._cursor = self._cursor.backward(rune_width(rune), size)
        return True

    def step_forward_by_width(self, rune: str) -> None:
        """Advance past *rune*, which must be the rune just inserted at the cursor."""
        if self._at_end():
            return
        self._cursor = self._cursor.forward(rune_width(rune), len(rune.encode("utf-8")))

    # -- history ------------------------------------------------------------

    def browse_history_up(self) -> None:
        if self._history_index == 0:
            return
        self._history_index -= 1

    def browse_history_down(self) -> None:
        if self._history_index == len(self._history):
            return
        self._history_index += 1

    def materialize_history_selection(self) -> None:
        """Show the selected history entry, or an empty line when not browsing.

        Whatever was being typed before browsing is discarded. The cursor is
        placed at the end of the recalled line.
        """
        if not self.is_browsing_history:
            self.clear()
            return

        self._content = self._history[self._history_index].encode("utf-8")
        self.move_to_end()

    def commit_to_history(self) -> None:
        self._history.append(self.text)
        self._history_index = len(self._history)

    # -- rendering ----------------------------------------------------------

    def snapshot(self) -> LineEditorView:
        """Return a view for drawing; the pending error is handed over once."""
        view = LineEditorView(
            prompt=self._prompt,
            content=self._content,
            cursor_column=self._cursor.column,
            error=self._error,
        )
        self._error = ""
        return view
