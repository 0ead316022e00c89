"""Exception types raised by txtmanip."""

from __future__ import annotations


class TxtmanipError(Exception):
    """Base class for txtmanip errors."""


class StartupError(TxtmanipError):
    """The session cannot start: bad source, empty input or bad configuration."""


class ParseError(TxtmanipError):
    """A command line could not be split into words (unbalanced quotes, etc.)."""

    def __init__(self, command_line: str, reason: str) -> None:
        super().__init__(f"parse command failed: {reason}")
        self.command_line = command_line
        self.reason = reason


class EmptyCommandError(TxtmanipError):
    """A command line contained no words."""


class EmptyHistoryError(TxtmanipError):
    """Undo was requested with nothing to undo."""
