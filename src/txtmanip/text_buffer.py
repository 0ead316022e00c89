"""Transformable text, its undo stack, and the log of commands that produced it."""

from __future__ import annotations

from txtmanip.errors import EmptyHistoryError


class TextBuffer:
    """Current content plus snapshots of every content it replaced."""

    def __init__(self, content: bytes) -> None:
        self._content = content
        self._undo_stack: list[bytes] = []

    @property
    def content(self) -> bytes:
        return self._content

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    def set_content(self, content: bytes) -> None:
        self._content = content

    def push_undo(self) -> None:
        """Snapshot the current content. Call before :meth:`set_content`."""
        self._undo_stack.append(self._content)

    def undo(self) -> None:
        """Restore the most recent snapshot.

        Raises :class:`EmptyHistoryError` when there is nothing to restore.
        """
        if not self._undo_stack:
            raise EmptyHistoryError("nothing to undo")
        self._content = self._undo_stack.pop()


class InvocationLog:
    """Command lines that ran successfully, oldest first."""

    def __init__(self) -> None:
        self._entries: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, command_line: str) -> None:
        self._entries.append(command_line)

    def pop_last(self) -> str:
        if not self._entries:
            raise EmptyHistoryError("invocation log is empty")
        return self._entries.pop()

    def snapshot(self) -> tuple[str, ...]:
        return tuple(self._entries)


class Transcript:
    """A text buffer and its invocation log, always changed together.

    Every applied command pushes one undo snapshot and one log entry; every
    revert pops one of each, so ``buffer.undo_depth == len(log)`` holds
    between calls.
    """

    def __init__(self, content: bytes) -> None:
        self.buffer = TextBuffer(content)
        self.log = InvocationLog()

    @property
    def content(self) -> bytes:
        return self.buffer.content

    @property
    def can_revert(self) -> bool:
        return self.buffer.undo_depth > 0

    def apply(self, command_line: str, output: bytes) -> None:
        """Replace the content with *output* produced by *command_line*."""
        self.buffer.push_undo()
        self.buffer.set_content(output)
        self.log.record(command_line)

    def revert(self) -> str:
        """Undo the last applied command and return its command line.

        Raises :class:`EmptyHistoryError` when nothing has been applied.
        """
        self.buffer.undo()
        return self.log.pop_last()
