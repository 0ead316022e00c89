"""Interactive session: key dispatch, command submission, undo, replay.

A :class:`SessionController` owns all mutable session state and handles
one key event at a time. :func:`run_session` wires a controller to a
terminal and waits for the session to end.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable

from txtmanip.config import AllowList
from txtmanip.errors import EmptyCommandError
from txtmanip.keybindings import Action, KeybindingsManager, KeyEvent
from txtmanip.line_editor import LineEditor
from txtmanip.pipeline import Spawner, Success, execute, run_process
from txtmanip.renderer import Renderer
from txtmanip.source import Source, replay_line
from txtmanip.terminal import Terminal
from txtmanip.text_buffer import Transcript

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Everything one session mutates, owned by its controller."""

    source: Source
    allow_list: AllowList
    editor: LineEditor = field(default_factory=LineEditor)
    transcript: Transcript = field(init=False)

    def __post_init__(self) -> None:
        self.transcript = Transcript(self.source.content)


class SessionController:
    """Applies key events to a :class:`SessionState` and redraws after each."""

    def __init__(
        self,
        state: SessionState,
        renderer: Renderer | None = None,
        *,
        keybindings: KeybindingsManager | None = None,
        spawn: Spawner = run_process,
    ) -> None:
        self.state = state
        self._renderer = renderer
        self._keybindings = keybindings or KeybindingsManager()
        self._spawn = spawn
        self._quit = False

        self.on_quit: Callable[[str], None] | None = None

        self._handlers: dict[Action, Callable[[KeyEvent], None]] = {
            "quit": self._handle_quit,
            "undo": self._handle_undo,
            "submit": self._handle_submit,
            "insert": self._handle_insert,
            "cursorLineStart": lambda _: self.state.editor.move_to_start(),
            "cursorLineEnd": lambda _: self.state.editor.move_to_end(),
            "cursorLeft": lambda _: self.state.editor.step_backward(),
            "cursorRight": lambda _: self.state.editor.step_forward(),
            "historyUp": self._handle_history_up,
            "historyDown": self._handle_history_down,
            "deleteCharBackward": self._handle_backspace,
            "deleteCharForward": lambda _: self.state.editor.delete_at_cursor(),
        }

    @property
    def is_quit(self) -> bool:
        return self._quit

    def replay(self) -> str:
        return replay_line(self.state.source.descriptor, self.state.transcript.log.snapshot())

    # -- event entry points -------------------------------------------------

    def handle_input(self, data: str) -> None:
        """Handle one complete input sequence from the terminal.

        Unbound sequences are ignored. A :class:`~txtmanip.errors.ParseError`
        from a submitted command propagates to the caller.
        """
        if self._quit:
            return
        event = self._keybindings.decode(data)
        if event is None:
            return
        self.handle_event(event)

    def handle_event(self, event: KeyEvent) -> None:
        self._handlers[event.action](event)
        if self._quit:
            if self.on_quit:
                self.on_quit(self.replay())
            return
        self.render()

    def render(self) -> None:
        if self._renderer is None:
            return
        self._renderer.draw(self.state.editor.snapshot(), self.state.transcript.content)

    # -- handlers -----------------------------------------------------------

    def _handle_quit(self, event: KeyEvent) -> None:
        self._quit = True

    def _handle_undo(self, event: KeyEvent) -> None:
        transcript = self.state.transcript
        if not transcript.can_revert:
            return
        command_line = transcript.revert()
        logger.debug("Undid %r", command_line)

    def _handle_submit(self, event: KeyEvent) -> None:
        editor = self.state.editor
        if editor.is_empty():
            return

        command_line = editor.text
        try:
            result = execute(
                command_line,
                self.state.transcript.content,
                self.state.allow_list,
                spawn=self._spawn,
            )
        except EmptyCommandError:
            editor.clear()
            return

        if isinstance(result, Success):
            self.state.transcript.apply(command_line, result.output)
            editor.commit_to_history()
            editor.clear()
            return

        editor.clear()
        editor.set_error(result.message)

    def _handle_insert(self, event: KeyEvent) -> None:
        editor = self.state.editor
        editor.insert(event.char)
        editor.step_forward_by_width(event.char)

    def _handle_backspace(self, event: KeyEvent) -> None:
        editor = self.state.editor
        if editor.step_backward():
            editor.delete_at_cursor()

    def _handle_history_up(self, event: KeyEvent) -> None:
        self.state.editor.browse_history_up()
        self.state.editor.materialize_history_selection()

    def _handle_history_down(self, event: KeyEvent) -> None:
        self.state.editor.browse_history_down()
        self.state.editor.materialize_history_selection()


async def run_session(controller: SessionController, terminal: Terminal) -> str:
    """Run *controller* on *terminal* until the user quits.

    Returns the replay line. Any exception raised while handling a key
    (a malformed command line, for instance) ends the session and is
    re-raised here. The terminal is always restored before returning.
    """
    loop = asyncio.get_running_loop()
    done: asyncio.Future[str] = loop.create_future()

    def on_input(data: str) -> None:
        if done.done():
            return
        try:
            controller.handle_input(data)
        except Exception as exc:
            done.set_exception(exc)

    def on_quit(line: str) -> None:
        if not done.done():
            done.set_result(line)

    controller.on_quit = on_quit
    try:
        terminal.start(on_input, controller.render)
        terminal.clear_screen()
        controller.render()
        return await done
    finally:
        terminal.stop()
