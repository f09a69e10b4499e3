"""Cursor movement for navigation keys.

Moves operate in document space only; ``rx`` and the viewport are refreshed
later by ``recompute_scroll``.
"""

from __future__ import annotations

from .input import (
    KEY_DOWN,
    KEY_END,
    KEY_HOME,
    KEY_LEFT,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_RIGHT,
    KEY_UP,
)
from .state import ViewerState

NAVIGATION_KEYS = frozenset(
    {KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_PAGE_UP, KEY_PAGE_DOWN, KEY_HOME, KEY_END}
)


def _step(state: ViewerState, key: str) -> None:
    document = state.document
    row = document.row_at(state.cy)
    if key == KEY_UP:
        if state.cy > 0:
            state.cy -= 1
    elif key == KEY_DOWN:
        # One past the last row is a valid position; nothing below it is.
        if state.cy < document.numrows:
            state.cy += 1
    elif key == KEY_LEFT:
        if state.cx > 0:
            state.cx -= 1
        elif state.cy > 0:
            state.cy -= 1
            state.cx = document.row_length(state.cy)
    elif key == KEY_RIGHT:
        if row is not None:
            if state.cx < row.size:
                state.cx += 1
            else:
                state.cy += 1
                state.cx = 0
    elif key == KEY_HOME:
        state.cx = 0
    elif key == KEY_END:
        if row is not None:
            state.cx = row.size


def clamp_cursor_column(state: ViewerState) -> None:
    state.cx = max(0, min(state.cx, state.document.row_length(state.cy)))


def move_cursor(state: ViewerState, key: str) -> bool:
    """Apply one navigation key; return whether ``key`` was a navigation key.

    Page keys replay ``screenrows`` single up/down steps so paging matches
    pressing the arrow key that many times.
    """
    if key not in NAVIGATION_KEYS:
        return False
    if key in (KEY_PAGE_UP, KEY_PAGE_DOWN):
        step = KEY_UP if key == KEY_PAGE_UP else KEY_DOWN
        for _ in range(state.screenrows):
            _step(state, step)
            clamp_cursor_column(state)
    else:
        _step(state, key)
        clamp_cursor_column(state)
    return True
