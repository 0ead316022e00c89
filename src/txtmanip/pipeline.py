"""Command pipeline: split a command line, enforce the allow-list, run it.

The command runs synchronously with the current text on its standard input.
Its outcome is classified into :class:`Success`, :class:`Failure` or
:class:`Disallowed`; only malformed quoting raises.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Callable, Union

from txtmanip.config import AllowList
from txtmanip.errors import EmptyCommandError, ParseError

logger = logging.getLogger(__name__)

# grep exits with status 1 when no lines matched; that is an empty result here.
_NO_MATCH_COMMAND = "grep"
_NO_MATCH_STATUS = 1


@dataclass(frozen=True)
class Success:
    output: bytes


@dataclass(frozen=True)
class Failure:
    message: str
    exit_code: int | None = None


@dataclass(frozen=True)
class Disallowed:
    command: str

    @property
    def message(self) -> str:
        return f"{self.command} cannot be executed"


Result = Union[Success, Failure, Disallowed]

Spawner = Callable[[list[str], bytes], "subprocess.CompletedProcess[bytes]"]


def run_process(argv: list[str], stdin: bytes) -> subprocess.CompletedProcess[bytes]:
    """Run *argv* to completion, feeding *stdin* and capturing both outputs."""
    return subprocess.run(argv, input=stdin, capture_output=True, check=False)


def split_command(command_line: str) -> list[str]:
    """Split *command_line* into words using POSIX shell quoting rules."""
    try:
        return shlex.split(command_line)
    except ValueError as exc:
        raise ParseError(command_line, str(exc)) from exc


def classify(base_command: str, completed: subprocess.CompletedProcess[bytes]) -> Result:
    code = completed.returncode
    if code == 0:
        return Success(completed.stdout)
    if base_command == _NO_MATCH_COMMAND and code == _NO_MATCH_STATUS:
        return Success(completed.stdout)

    stderr = completed.stderr.decode("utf-8", errors="replace").strip()
    return Failure(stderr or f"{base_command} exited with status {code}", exit_code=code)


def execute(
    command_line: str,
    content: bytes,
    allow_list: AllowList,
    *,
    spawn: Spawner = run_process,
) -> Result:
    """Run *command_line* over *content*.

    Raises :class:`ParseError` on malformed quoting and
    :class:`EmptyCommandError` when the line holds no words.
    """
    args = split_command(command_line)
    if not args:
        raise EmptyCommandError("command line is empty")

    base_command = args[0]
    if base_command not in allow_list:
        logger.info("Rejected command not in allow-list: %s", base_command)
        return Disallowed(base_command)

    logger.debug("Spawning %r with %d bytes of input", args, len(content))
    try:
        completed = spawn(args, content)
    except OSError as exc:
        logger.info("Failed to launch %s: %s", base_command, exc)
        return Failure(str(exc))

    result = classify(base_command, completed)
    logger.info("%s exited with status %d", base_command, completed.returncode)
    return result
