"""Terminal text utilities: UTF-8 rune decoding, width measurement, sanitizing.

The line editor works on raw UTF-8 bytes and needs rune-at-a-time decoding
plus per-rune display widths. The renderer needs visible widths of whole
lines and width-bounded truncation that never splits a grapheme cluster.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC / APC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z]"              # CSI
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"   # OSC
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"    # APC
)

# C0/C1 controls except tab, which is expanded separately
_CONTROL_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f-\x9f]")

TAB_REPLACEMENT = "   "

REPLACEMENT_CHAR = "\ufffd"

# ---------------------------------------------------------------------------
# UTF-8 rune decoding
# ---------------------------------------------------------------------------


def _sequence_length(lead: int) -> int:
    """Expected byte length of a UTF-8 sequence starting with *lead*."""
    if lead < 0x80:
        return 1
    if 0xC0 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF7:
        return 4
    return 1


def _is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def decode_rune(data: bytes, offset: int = 0) -> tuple[str, int]:
    """Decode the rune starting at *offset*.

    Returns ``(rune, size)``. At or past the end of *data* the result is
    ``("", 0)``. Invalid sequences decode as U+FFFD with size 1, so callers
    always make progress.
    """
    if offset >= len(data):
        return "", 0

    size = _sequence_length(data[offset])
    chunk = data[offset : offset + size]
    if len(chunk) == size:
        try:
            return chunk.decode("utf-8"), size
        except UnicodeDecodeError:
            pass
    return REPLACEMENT_CHAR, 1


def decode_last_rune(data: bytes, end: int | None = None) -> tuple[str, int]:
    """Decode the rune that ends right before *end* (defaults to ``len(data)``).

    Returns ``(rune, size)``; ``("", 0)`` when *end* is 0.
    """
    if end is None:
        end = len(data)
    if end <= 0:
        return "", 0

    start = end - 1
    limit = max(0, end - 4)
    while start > limit and _is_continuation(data[start]):
        start -= 1

    rune, size = decode_rune(data, start)
    if start + size == end:
        return rune, size
    return REPLACEMENT_CHAR, 1


def iter_runes(data: bytes):
    """Yield ``(rune, size)`` for every rune in *data*."""
    offset = 0
    while offset < len(data):
        rune, size = decode_rune(data, offset)
        yield rune, size
        offset += size


# ---------------------------------------------------------------------------
# Widths
# ---------------------------------------------------------------------------


def rune_width(rune: str) -> int:
    """Display width of a single code point: 0, 1 or 2 columns.

    Control characters and combining marks are zero-width.
    """
    if not rune:
        return 0
    cp = ord(rune)
    if cp < 0x20 or (0x7F <= cp <= 0x9F):
        return 0
    return max(_wcwidth.wcwidth(rune), 0)


def bytes_width(data: bytes) -> int:
    """Sum of rune widths of UTF-8 *data*."""
    return sum(rune_width(rune) for rune, _ in iter_runes(data))


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Emoji sequences (VS16, ZWJ, skin tones, flags) are two columns wide;
    otherwise the first code point decides.
    """
    if not g:
        return 0
    if len(g) == 1:
        return rune_width(g)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    if ord(g[0]) >= 0x1F000:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0
    return rune_width(g[0])


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    ANSI escape sequences do not count and tabs count as three spaces.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text).replace("\t", TAB_REPLACEMENT)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    return sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))


# ---------------------------------------------------------------------------
# Sanitizing and truncation
# ---------------------------------------------------------------------------


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def sanitize_line(text: str) -> str:
    """Make one line of command output safe to draw in a single screen row."""
    text = strip_ansi(text).replace("\t", TAB_REPLACEMENT)
    return _CONTROL_RE.sub("", text)


def truncate_to_width(text: str, max_width: int) -> str:
    """Return the longest prefix of *text* fitting in *max_width* columns.

    The cut always falls on a grapheme boundary, so a wide character that
    would straddle the edge is dropped entirely.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if cols + w > max_width:
            break
        result.append(g)
        cols += w
    return "".join(result)


def truncate_runes_to_width(text: str, max_width: int) -> str:
    """Like :func:`truncate_to_width`, but measured one code point at a time.

    This is the width rule the line editor's cursor follows, so input drawn
    with it always ends where the cursor says it does.
    """
    result: list[str] = []
    cols = 0
    for rune in text:
        w = rune_width(rune)
        if cols + w > max_width:
            break
        result.append(rune)
        cols += w
    return "".join(result)
