"""Frame composition for the viewer.

A frame is the complete byte buffer for one redraw: cursor hidden, cursor
homed, every screen row drawn and line-cleared, cursor placed and shown. It is
written with a single ``os.write`` so the terminal never shows a half frame.
"""

from __future__ import annotations

import os

from . import __version__
from .document import Document
from .state import ViewerState

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
ROW_SEPARATOR = b"\r\n"

TITLE_TEMPLATE = "~ tildeview -- version {version}"
DEBUG_TEMPLATE = "~ cx: {cx}, cy: {cy}"


def cursor_position(row: int, col: int) -> bytes:
    """Build a 1-indexed cursor-position sequence."""
    return f"\x1b[{row};{col}H".encode("ascii")


def centered_line(text: str, width: int) -> bytes:
    """Clip ``text`` to ``width`` and left-pad it to sit near the center.

    The padding is ``(width - len) // 2`` less one column when non-zero.
    """
    data = text.encode("utf-8")[: max(0, width)]
    padding = (width - len(data)) // 2
    if padding:
        padding -= 1
    return b" " * max(0, padding) + data


def title_line(state: ViewerState) -> bytes:
    return centered_line(TITLE_TEMPLATE.format(version=__version__), state.screencols)


def debug_line(state: ViewerState) -> bytes:
    return centered_line(DEBUG_TEMPLATE.format(cx=state.cx, cy=state.cy), state.screencols)


def _visible_row_bytes(state: ViewerState, y: int) -> bytes:
    filerow = state.rowoff + y
    row = state.document.row_at(filerow)
    if row is None:
        if state.numrows == 0:
            title_row = state.screenrows // 3
            if y == title_row:
                return title_line(state)
            if y == title_row + 1 and state.show_debug_line:
                return debug_line(state)
        return b""
    length = max(0, min(row.rsize - state.coloff, state.screencols))
    return row.render[state.coloff : state.coloff + length]


def compose_frame(state: ViewerState) -> bytes:
    """Return the full output buffer for the current viewport."""
    out: list[bytes] = [HIDE_CURSOR, CURSOR_HOME]
    for y in range(state.screenrows):
        out.append(_visible_row_bytes(state, y))
        out.append(ERASE_LINE)
        if y < state.screenrows - 1:
            out.append(ROW_SEPARATOR)
    out.append(cursor_position(state.cy - state.rowoff + 1, state.rx - state.coloff + 1))
    out.append(SHOW_CURSOR)
    return b"".join(out)


def write_frame(fd: int, state: ViewerState) -> None:
    os.write(fd, compose_frame(state))


def render_rows(document: Document, max_cols: int | None = None) -> list[bytes]:
    """Return each row's render form, optionally clipped to ``max_cols``."""
    if max_cols is None:
        return [row.render for row in document.rows]
    return [row.render[:max_cols] for row in document.rows]
