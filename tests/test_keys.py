"""Tests for key parsing and the session keybindings."""

from __future__ import annotations

import pytest

from txtmanip.keybindings import DEFAULT_KEYBINDINGS, KeybindingsManager, KeyEvent
from txtmanip.keys import SEQUENCES, is_printable_key, parse_key


class TestParseKey:
    """parse_key maps raw sequences to key ids."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ("\x1b", "escape"),
            ("\r", "enter"),
            ("\n", "enter"),
            ("\t", "tab"),
            (" ", "space"),
            ("\x7f", "backspace"),
            ("\x08", "backspace"),
            ("\x1b[A", "up"),
            ("\x1b[B", "down"),
            ("\x1b[C", "right"),
            ("\x1b[D", "left"),
            ("\x1bOA", "up"),
            ("\x1b[H", "home"),
            ("\x1b[F", "end"),
            ("\x1b[1~", "home"),
            ("\x1b[4~", "end"),
            ("\x1b[3~", "delete"),
            ("\x1b[1;5C", "ctrl+right"),
            ("\x1b[1;3D", "alt+left"),
            ("\x1b[Z", "shift+tab"),
        ],
    )
    def test_named_sequences(self, data: str, expected: str) -> None:
        assert parse_key(data) == expected

    def test_ctrl_letters(self) -> None:
        assert parse_key("\x01") == "ctrl+a"
        assert parse_key("\x03") == "ctrl+c"
        assert parse_key("\x1a") == "ctrl+z"

    def test_alt_letter(self) -> None:
        assert parse_key("\x1bx") == "alt+x"

    def test_printable_preserved(self) -> None:
        assert parse_key("a") == "a"
        assert parse_key("A") == "A"
        assert parse_key("世") == "世"

    def test_unknown(self) -> None:
        assert parse_key("") is None
        assert parse_key("\x1b[99~") is None

    def test_modified_tilde_keys(self) -> None:
        assert parse_key("\x1b[3;5~") == "ctrl+delete"
        assert parse_key("\x1b[5;2~") == "shift+pageUp"

    def test_alt_backspace(self) -> None:
        assert parse_key("\x1b\x7f") == "alt+backspace"

    def test_sequence_table_covers_ss3_and_csi(self) -> None:
        assert SEQUENCES["\x1bOH"] == SEQUENCES["\x1b[H"] == "home"
        assert SEQUENCES["\x1b[1;2A"] == "shift+up"

    def test_is_printable_key(self) -> None:
        assert is_printable_key("a")
        assert is_printable_key("é")
        assert not is_printable_key("enter")
        assert not is_printable_key("ctrl+a")


class TestKeybindingsManager:
    """Default bindings, overrides, and decoding into KeyEvents."""

    def test_default_bindings(self) -> None:
        kb = KeybindingsManager()
        assert kb.action_for("escape") == "quit"
        assert kb.action_for("ctrl+c") == "quit"
        assert kb.action_for("ctrl+z") == "undo"
        assert kb.action_for("enter") == "submit"
        assert kb.action_for("ctrl+a") == "cursorLineStart"
        assert kb.action_for("ctrl+e") == "cursorLineEnd"
        assert kb.action_for("ctrl+b") == "cursorLeft"
        assert kb.action_for("ctrl+f") == "cursorRight"
        assert kb.action_for("up") == "historyUp"
        assert kb.action_for("down") == "historyDown"
        assert kb.action_for("backspace") == "deleteCharBackward"
        assert kb.action_for("ctrl+d") == "deleteCharForward"

    def test_every_default_key_resolves_to_its_action(self) -> None:
        kb = KeybindingsManager()
        for action, keys in DEFAULT_KEYBINDINGS.items():
            for key in keys if isinstance(keys, list) else [keys]:
                assert kb.action_for(key) == action

    def test_override(self) -> None:
        kb = KeybindingsManager({"undo": "ctrl+u"})
        assert kb.action_for("ctrl+u") == "undo"
        assert kb.action_for("ctrl+z") is None
        assert kb.action_for("escape") == "quit"

    def test_decode_bound_key(self) -> None:
        kb = KeybindingsManager()
        assert kb.decode("\x1b[D") == KeyEvent("cursorLeft")
        assert kb.decode("\x02") == KeyEvent("cursorLeft")
        assert kb.decode("\x1b") == KeyEvent("quit")

    def test_decode_printable_inserts(self) -> None:
        kb = KeybindingsManager()
        assert kb.decode("g") == KeyEvent("insert", "g")
        assert kb.decode("世") == KeyEvent("insert", "世")
        assert kb.decode(" ") == KeyEvent("insert", " ")

    def test_decode_unbound_is_none(self) -> None:
        kb = KeybindingsManager()
        assert kb.decode("\t") is None
        assert kb.decode("\x1b[5~") is None
        assert kb.decode("\x1bx") is None
