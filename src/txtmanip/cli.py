"""CLI entry point for txtmanip. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from txtmanip import NAME, __version__
from txtmanip.config import DEFAULT_CONFIG_PATH, load_config
from txtmanip.errors import ParseError, StartupError
from txtmanip.renderer import TerminalRenderer
from txtmanip.session import SessionController, SessionState, run_session
from txtmanip.source import read_source
from txtmanip.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 11

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

HELP = """\
Text manipulation in an interactive console with OS commands.

Starts an interactive session on the content of FILE, or of standard input
when FILE is omitted. Each command line you submit is run with the current
text on its standard input, and its output becomes the new text. Only
commands listed under enable_commands in the configuration file may run.

After quitting, prints a one-liner that produces the same final result.

\b
Keys in interactive mode:
  Esc, Ctrl+C          Quit
  Enter                Run the command line
  Ctrl+Z               Undo the last command
  Up, Down             Browse command history
  Left/Right, Ctrl+B/F Move the cursor
  Ctrl+A, Ctrl+E       Jump to start / end of line
  Backspace, Delete    Delete a character
"""


def _configure_logging(level: str, log_file: str | None) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        filename=log_file,
    )


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(EXIT_ERROR)


class TxtmanipCommand(click.Command):
    """A click command whose usage errors exit with the tool's error status."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = EXIT_ERROR
            raise


@click.command(
    cls=TxtmanipCommand,
    help=HELP,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("file", required=False, type=click.Path())
@click.option(
    "-c",
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Configuration file path.",
)
@click.option("--log-file", default=None, help="Write log records to this file.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    show_default=True,
)
@click.version_option(__version__, prog_name=NAME, message="%(prog)s version %(version)s")
def main(file, config_path, log_file, log_level):
    _configure_logging(log_level, log_file)

    try:
        source = read_source(file, click.get_binary_stream("stdin"))
        config = load_config(config_path)
    except StartupError as exc:
        _fail(str(exc))

    state = SessionState(source=source, allow_list=config.allow_list)
    terminal = ProcessTerminal()
    controller = SessionController(state, TerminalRenderer(terminal))

    try:
        line = asyncio.run(run_session(controller, terminal))
    except ParseError as exc:
        logger.info("Session aborted: %s", exc)
        _fail(str(exc))
    except OSError as exc:
        _fail(f"initialize failed: {exc}")

    click.echo(line)


if __name__ == "__main__":
    main()
