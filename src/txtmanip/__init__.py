"""txtmanip: transform text interactively by piping it through OS commands."""

NAME = "txtmanip"
__version__ = "0.2.1"

from txtmanip.config import AllowList, Config, load_config
from txtmanip.errors import (
    EmptyCommandError,
    EmptyHistoryError,
    ParseError,
    StartupError,
    TxtmanipError,
)
from txtmanip.line_editor import Cursor, LineEditor, LineEditorView
from txtmanip.pipeline import Disallowed, Failure, Result, Success, execute
from txtmanip.session import SessionController, SessionState, run_session
from txtmanip.source import Source, read_source, replay_line
from txtmanip.text_buffer import InvocationLog, TextBuffer, Transcript

__all__ = [
    "NAME",
    "__version__",
    # Config
    "AllowList",
    "Config",
    "load_config",
    # Errors
    "EmptyCommandError",
    "EmptyHistoryError",
    "ParseError",
    "StartupError",
    "TxtmanipError",
    # Line editor
    "Cursor",
    "LineEditor",
    "LineEditorView",
    # Pipeline
    "Disallowed",
    "Failure",
    "Result",
    "Success",
    "execute",
    # Session
    "SessionController",
    "SessionState",
    "run_session",
    # Source
    "Source",
    "read_source",
    "replay_line",
    # Text buffer
    "InvocationLog",
    "TextBuffer",
    "Transcript",
]
