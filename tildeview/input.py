"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into key tokens. Literal keys
are one-character strings (``chr(byte)``); navigation keys are the named
tokens below. Escape sequences are decoded by a small state machine and any
sequence it does not recognize collapses to a literal Escape.
"""

from __future__ import annotations

import logging
import os
import select
from collections.abc import Callable

from .errors import TerminalInputClosed

ESC_SEQUENCE_TIMEOUT_MS = 100
READ_POLL_TIMEOUT_MS = 100

ESC = "\x1b"
KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"
KEY_PAGE_UP = "PAGE_UP"
KEY_PAGE_DOWN = "PAGE_DOWN"
KEY_HOME = "HOME"
KEY_END = "END"
KEY_DELETE = "DELETE"

NAMED_KEYS = frozenset(
    {
        KEY_UP,
        KEY_DOWN,
        KEY_LEFT,
        KEY_RIGHT,
        KEY_PAGE_UP,
        KEY_PAGE_DOWN,
        KEY_HOME,
        KEY_END,
        KEY_DELETE,
    }
)

KEY_LOGGER = logging.getLogger("tildeview.keyevents")

# Decoder states.
START = "START"
SAW_ESCAPE = "SAW_ESCAPE"
SAW_BRACKET = "SAW_BRACKET"
SAW_O = "SAW_O"
SAW_DIGIT = "SAW_DIGIT"
SAW_UNKNOWN = "SAW_UNKNOWN"

_DIGITS = frozenset(b"0123456789")

# (state, byte) -> next state or key token. Pairs missing from the table
# resolve through _FALLBACK.
ESCAPE_TRANSITIONS: dict[tuple[str, int], str] = {
    (SAW_ESCAPE, ord("[")): SAW_BRACKET,
    (SAW_ESCAPE, ord("O")): SAW_O,
    (SAW_BRACKET, ord("A")): KEY_UP,
    (SAW_BRACKET, ord("B")): KEY_DOWN,
    (SAW_BRACKET, ord("C")): KEY_RIGHT,
    (SAW_BRACKET, ord("D")): KEY_LEFT,
    (SAW_BRACKET, ord("F")): KEY_END,
    (SAW_BRACKET, ord("H")): KEY_HOME,
    (SAW_O, ord("F")): KEY_END,
    (SAW_O, ord("H")): KEY_HOME,
}
ESCAPE_TRANSITIONS.update({(SAW_BRACKET, digit): SAW_DIGIT for digit in _DIGITS})

# Keys for ``ESC [ <digit> ~``.
TILDE_KEYS: dict[int, str] = {
    ord("1"): KEY_HOME,
    ord("3"): KEY_DELETE,
    ord("4"): KEY_END,
    ord("5"): KEY_PAGE_UP,
    ord("6"): KEY_PAGE_DOWN,
    ord("7"): KEY_HOME,
    ord("8"): KEY_END,
}

# An unknown byte after ESC still consumes one more byte before giving up.
_FALLBACK: dict[str, str] = {
    SAW_ESCAPE: SAW_UNKNOWN,
    SAW_BRACKET: ESC,
    SAW_O: ESC,
    SAW_DIGIT: ESC,
    SAW_UNKNOWN: ESC,
}


def is_named_key(key: str) -> bool:
    return key in NAMED_KEYS


def decode_key(first: bytes, read_follow: Callable[[], bytes | None]) -> str:
    """Decode one key starting from ``first``.

    ``read_follow`` returns the next byte of an escape sequence or ``None``
    when nothing arrived in time. A missing byte at any point yields ``ESC``.
    """
    byte = first[0]
    if byte != 0x1B:
        return chr(byte)

    state = SAW_ESCAPE
    digit = 0
    while True:
        follow = read_follow()
        if not follow:
            return ESC
        value = follow[0]
        if state == SAW_DIGIT:
            if value == ord("~"):
                return TILDE_KEYS.get(digit, ESC)
            return ESC
        target = ESCAPE_TRANSITIONS.get((state, value), _FALLBACK[state])
        if target == SAW_DIGIT:
            digit = value
        if target not in _FALLBACK:
            return target
        state = target


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_first_byte(fd: int) -> bytes:
    """Block until one byte arrives, polling in short slices.

    Raises ``TerminalInputClosed`` on end of input; ``OSError`` from the read
    propagates.
    """
    while True:
        ready, _, _ = select.select([fd], [], [], READ_POLL_TIMEOUT_MS / 1000.0)
        if not ready:
            continue
        ch = os.read(fd, 1)
        if not ch:
            raise TerminalInputClosed("standard input closed")
        return ch


def read_key(fd: int) -> str:
    """Read and decode exactly one key from ``fd``."""
    first = _read_first_byte(fd)
    key = decode_key(first, lambda: _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS))
    if KEY_LOGGER.isEnabledFor(logging.DEBUG):
        KEY_LOGGER.debug("key %r", key)
    return key
