"""Keyboard input parsing for the interactive session.

Turns one complete terminal input sequence (as emitted by
:class:`txtmanip.stdin_buffer.StdinBuffer`) into a key identifier such as
``"up"``, ``"ctrl+a"`` or ``"x"``. Only xterm/VT sequences are understood;
the terminal never enables extended keyboard protocols.
"""

from __future__ import annotations

KeyId = str

# CSI/SS3 final byte -> key
_CURSOR_FINALS: dict[str, KeyId] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# CSI <code> ~ -> key
_TILDE_CODES: dict[str, KeyId] = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageUp",
    "6": "pageDown",
    "7": "home",
    "8": "end",
}

# xterm modifier parameter -> key id prefix
_MODIFIERS: dict[str, str] = {
    "2": "shift+",
    "3": "alt+",
    "5": "ctrl+",
}


def _build_sequence_table() -> dict[str, KeyId]:
    table: dict[str, KeyId] = {"\x1b[Z": "shift+tab"}
    for final, key in _CURSOR_FINALS.items():
        table[f"\x1b[{final}"] = key
        table[f"\x1bO{final}"] = key
        for param, prefix in _MODIFIERS.items():
            table[f"\x1b[1;{param}{final}"] = prefix + key
    for code, key in _TILDE_CODES.items():
        table[f"\x1b[{code}~"] = key
        for param, prefix in _MODIFIERS.items():
            table[f"\x1b[{code};{param}~"] = prefix + key
    return table


SEQUENCES: dict[str, KeyId] = _build_sequence_table()

_SINGLE_BYTE_KEYS: dict[str, KeyId] = {
    "\x1b": "escape",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
    " ": "space",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x00": "ctrl+space",
}


def parse_key(data: str) -> KeyId | None:
    """Parse one input sequence and return its key identifier, or ``None``.

    Printable characters are returned as themselves (case preserved), so a
    caller can insert them directly.
    """
    if not data:
        return None
    if data in SEQUENCES:
        return SEQUENCES[data]
    if data in _SINGLE_BYTE_KEYS:
        return _SINGLE_BYTE_KEYS[data]

    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return "ctrl+" + chr(code + ord("a") - 1)
        return data if data.isprintable() else None

    # ESC prefix is the meta key
    if len(data) == 2 and data[0] == "\x1b":
        key = parse_key(data[1])
        if key is not None and key != "escape":
            return "alt+" + key.lower()

    return None


def is_printable_key(key_id: KeyId) -> bool:
    """True for key ids that stand for a literal character to insert."""
    return len(key_id) == 1 and key_id.isprintable()
