"""Keyboard input decoding.

Turns a chunk of raw terminal input into logical key tokens such as
``"up"``, ``"enter"`` or a literal character.  Escape sequences are resolved
against :data:`KEY_SEQUENCES`, longest sequence first, so ``ESC [ A`` is never
mistaken for a lone ``ESC`` followed by ``[`` and ``A``.

Each chunk is decoded on its own.  A sequence split across two reads (for
example ``ESC`` at the end of one chunk and ``[A`` at the start of the next)
decodes as literal characters; no prefix is carried between calls.
"""

from __future__ import annotations

from typing import Iterator

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key tokens produced by :func:`decode_keys`."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    shift_tab = "shift_tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "page_up"
    page_down = "page_down"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    f1 = "f1"
    f2 = "f2"
    f3 = "f3"
    f4 = "f4"
    f5 = "f5"
    f6 = "f6"
    f7 = "f7"
    f8 = "f8"
    f9 = "f9"
    f10 = "f10"
    f11 = "f11"
    f12 = "f12"


ARROW_KEYS: frozenset[str] = frozenset({Key.up, Key.down, Key.left, Key.right})

# ---------------------------------------------------------------------------
# Sequence table
# ---------------------------------------------------------------------------

KEY_SEQUENCES: dict[str, str] = {
    # CSI cursor keys
    "\x1b[A": Key.up,
    "\x1b[B": Key.down,
    "\x1b[C": Key.right,
    "\x1b[D": Key.left,
    "\x1b[H": Key.home,
    "\x1b[F": Key.end,
    # SS3 cursor keys (application cursor mode)
    "\x1bOA": Key.up,
    "\x1bOB": Key.down,
    "\x1bOC": Key.right,
    "\x1bOD": Key.left,
    "\x1bOH": Key.home,
    "\x1bOF": Key.end,
    # Editing keypad
    "\x1b[1~": Key.home,
    "\x1b[2~": Key.insert,
    "\x1b[3~": Key.delete,
    "\x1b[4~": Key.end,
    "\x1b[5~": Key.page_up,
    "\x1b[6~": Key.page_down,
    # Function keys
    "\x1bOP": Key.f1,
    "\x1bOQ": Key.f2,
    "\x1bOR": Key.f3,
    "\x1bOS": Key.f4,
    "\x1b[15~": Key.f5,
    "\x1b[17~": Key.f6,
    "\x1b[18~": Key.f7,
    "\x1b[19~": Key.f8,
    "\x1b[20~": Key.f9,
    "\x1b[21~": Key.f10,
    "\x1b[23~": Key.f11,
    "\x1b[24~": Key.f12,
    # Back-tab
    "\x1b[Z": Key.shift_tab,
    # Single characters
    "\x1b": Key.escape,
    "\r": Key.enter,
    "\n": Key.enter,
    "\t": Key.tab,
    " ": Key.space,
    "\x7f": Key.backspace,
    "\x08": Key.backspace,
}

# Longest first; ties keep table order.
_ORDERED_SEQUENCES: list[tuple[str, str]] = sorted(
    KEY_SEQUENCES.items(), key=lambda item: -len(item[0])
)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode_keys(chunk: str | bytes) -> Iterator[str]:
    """Lazily yield the key tokens contained in one input *chunk*.

    Bytes are decoded as UTF-8, replacing invalid sequences.  Text that
    matches no known sequence is yielded one character at a time.
    """
    if isinstance(chunk, bytes):
        chunk = chunk.decode("utf-8", errors="replace")

    pos = 0
    length = len(chunk)
    while pos < length:
        for sequence, token in _ORDERED_SEQUENCES:
            if chunk.startswith(sequence, pos):
                yield token
                pos += len(sequence)
                break
        else:
            yield chunk[pos]
            pos += 1


def is_printable_key(key: str) -> bool:
    """Return ``True`` for a literal-character token that can be typed."""
    return len(key) == 1 and key.isprintable()
