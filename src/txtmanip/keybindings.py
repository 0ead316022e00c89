"""Session keybindings: which keys trigger which actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from txtmanip.keys import KeyId, is_printable_key, parse_key

Action = Literal[
    "quit",
    "undo",
    "submit",
    "insert",
    "cursorLineStart",
    "cursorLineEnd",
    "cursorLeft",
    "cursorRight",
    "historyUp",
    "historyDown",
    "deleteCharBackward",
    "deleteCharForward",
]

KeybindingsConfig = dict[Action, KeyId | list[KeyId]]

DEFAULT_KEYBINDINGS: dict[Action, KeyId | list[KeyId]] = {
    "quit": ["escape", "ctrl+c"],
    "undo": "ctrl+z",
    "submit": "enter",
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "historyUp": "up",
    "historyDown": "down",
    "deleteCharBackward": "backspace",
    "deleteCharForward": ["delete", "ctrl+d"],
}


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key press: an action, plus the character for ``insert``."""

    action: Action
    char: str = ""


class KeybindingsManager:
    """Maps key ids to actions, with optional overrides of the defaults."""

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._key_to_action: dict[KeyId, Action] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeybindingsConfig) -> None:
        merged: dict[Action, KeyId | list[KeyId]] = {**DEFAULT_KEYBINDINGS, **config}
        self._key_to_action.clear()
        for action, keys in merged.items():
            key_array = keys if isinstance(keys, list) else [keys]
            for key in key_array:
                self._key_to_action[key] = action

    def action_for(self, key_id: KeyId) -> Action | None:
        return self._key_to_action.get(key_id)

    def decode(self, data: str) -> KeyEvent | None:
        """Decode one complete input sequence into a :class:`KeyEvent`.

        Returns ``None`` for sequences that are neither bound nor printable.
        """
        key_id = parse_key(data)
        if key_id is None:
            return None

        action = self.action_for(key_id)
        if action is not None:
            return KeyEvent(action)
        if key_id == "space":
            return KeyEvent("insert", " ")
        if is_printable_key(key_id):
            return KeyEvent("insert", key_id)
        return None
