"""Source text acquisition and replay-line assembly."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import BinaryIO, Iterable

from txtmanip.errors import StartupError

STDIN_DESCRIPTOR = "<source>"


@dataclass(frozen=True)
class Source:
    """The initial text and where it came from."""

    content: bytes
    filename: str | None = None

    @property
    def descriptor(self) -> str:
        """Shell fragment that reproduces the source at the head of a pipeline."""
        if self.filename is None:
            return STDIN_DESCRIPTOR
        return f"cat {self.filename}"


def read_source(filename: str | None = None, stdin: BinaryIO | None = None) -> Source:
    """Read the whole source, from *filename* or else from standard input.

    Raises :class:`StartupError` for a missing or unreadable file and for
    empty input.
    """
    if filename is not None:
        if not os.path.exists(filename):
            raise StartupError(f"{filename} is not exist: no such file or directory")
        try:
            with open(filename, "rb") as f:
                content = f.read()
        except OSError as exc:
            raise StartupError(f"Open file failed: {exc}") from exc
    else:
        stream = stdin if stdin is not None else sys.stdin.buffer
        if stream.isatty():
            raise StartupError("Missing input")
        try:
            content = stream.read()
        except OSError as exc:
            raise StartupError(f"Reading from src failed: {exc}") from exc

    if not content:
        raise StartupError("Missing input")
    return Source(content=content, filename=filename)


def replay_line(descriptor: str, entries: Iterable[str]) -> str:
    """Join the source descriptor and executed command lines into one pipeline."""
    return " | ".join([descriptor, *entries])
