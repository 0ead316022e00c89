"""Tests for screen layout and terminal drawing."""

from __future__ import annotations

from txtmanip.line_editor import LineEditor, LineEditorView
from txtmanip.renderer import (
    BORDER_ROW,
    ERROR_ROW,
    INPUT_ROW,
    TEXT_ROW,
    TerminalRenderer,
    render_frame,
    text_lines,
)
from txtmanip.utils import bytes_width

from .virtual_terminal import VirtualTerminal


def view(content: str = "", error: str = "", prompt: str = "> ") -> LineEditorView:
    encoded = content.encode()
    return LineEditorView(
        prompt=prompt,
        content=encoded,
        cursor_column=len(prompt) + len(content),
        error=error,
    )


class TestTextLines:
    """Buffer content split into display lines."""

    def test_trailing_newline_dropped(self) -> None:
        assert text_lines(b"a\nb\n") == ["a", "b"]

    def test_no_trailing_newline(self) -> None:
        assert text_lines(b"a\nb") == ["a", "b"]

    def test_blank_lines_kept(self) -> None:
        assert text_lines(b"a\n\nb\n") == ["a", "", "b"]

    def test_invalid_utf8_replaced(self) -> None:
        assert text_lines(b"\xffa\n") == ["\ufffda"]

    def test_tabs_expanded(self) -> None:
        assert text_lines(b"a\tb\n") == ["a   b"]


class TestRenderFrame:
    """Row layout, clipping, and cursor placement."""

    def test_layout_rows(self) -> None:
        frame = render_frame(view("grep b"), b"a\nb\n", width=20, height=10)
        assert frame.lines[INPUT_ROW] == "> grep b"
        assert frame.lines[ERROR_ROW] == ""
        assert frame.lines[BORDER_ROW] == "-" * 20
        assert frame.lines[TEXT_ROW:] == ["a", "b"]
        assert frame.cursor_row == INPUT_ROW
        assert frame.cursor_column == 8

    def test_error_row(self) -> None:
        frame = render_frame(view(error="awk cannot be executed"), b"x\n", width=40, height=10)
        assert frame.lines[ERROR_ROW] == "awk cannot be executed"

    def test_multiline_error_flattened(self) -> None:
        frame = render_frame(view(error="first\n\nsecond\n"), b"x\n", width=40, height=10)
        assert frame.lines[ERROR_ROW] == "first second"

    def test_text_clipped_to_height(self) -> None:
        content = b"".join(b"line%d\n" % i for i in range(50))
        frame = render_frame(view(), content, width=20, height=6)
        assert len(frame.lines) == 6
        assert frame.lines[TEXT_ROW:] == ["line0", "line1", "line2"]

    def test_lines_truncated_to_width(self) -> None:
        frame = render_frame(view(), b"abcdefghij\n", width=5, height=10)
        assert frame.lines[TEXT_ROW] == "abcde"
        assert frame.lines[BORDER_ROW] == "-----"

    def test_cursor_clamped_to_width(self) -> None:
        frame = render_frame(view("a" * 30), b"x\n", width=10, height=10)
        assert frame.cursor_column == 9

    def test_cursor_ends_at_drawn_input_with_joined_emoji(self) -> None:
        editor = LineEditor(prompt="> ")
        for rune in "\U0001f468\u200d\U0001f469x":
            editor.insert(rune)
            editor.step_forward_by_width(rune)
        snapshot = editor.snapshot()
        frame = render_frame(snapshot, b"x\n", width=40, height=10)
        drawn = frame.lines[INPUT_ROW]
        assert drawn == "> \U0001f468\u200d\U0001f469x"
        assert bytes_width(drawn.encode()) == frame.cursor_column == 7


class TestTerminalRenderer:
    """Escape sequences written for a frame."""

    def test_draw_writes_frame(self) -> None:
        terminal = VirtualTerminal(rows=10, columns=20)
        TerminalRenderer(terminal).draw(view("sort"), b"b\na\n")
        out = terminal.output
        assert out.startswith("\x1b[?25l\x1b[H")
        assert "> sort\x1b[K" in out
        assert "-" * 20 in out
        assert "b\x1b[K\r\na\x1b[K" in out
        assert out.endswith("\x1b[1;7H\x1b[?25h")

    def test_error_drawn_in_red(self) -> None:
        terminal = VirtualTerminal(rows=10, columns=40)
        TerminalRenderer(terminal).draw(view(error="boom"), b"x\n")
        assert "\x1b[31mboom\x1b[39m" in terminal.output

    def test_no_color_without_error(self) -> None:
        terminal = VirtualTerminal(rows=10, columns=40)
        TerminalRenderer(terminal).draw(view(), b"x\n")
        assert "\x1b[31m" not in terminal.output
