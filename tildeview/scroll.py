"""Viewport clamping run once per frame before composing output."""

from __future__ import annotations

from .document import column_to_render_column
from .state import ViewerState


def recompute_scroll(state: ViewerState) -> None:
    """Refresh ``rx`` and move the viewport just enough to show the cursor.

    Past-the-end rows have no render offset, so ``rx`` is 0 there. Offsets only
    change when the cursor would otherwise fall outside the window.
    """
    row = state.document.row_at(state.cy)
    state.rx = column_to_render_column(row, state.cx) if row is not None else 0

    if state.cy < state.rowoff:
        state.rowoff = state.cy
    if state.cy >= state.rowoff + state.screenrows:
        state.rowoff = state.cy - state.screenrows + 1
    if state.rx < state.coloff:
        state.coloff = state.rx
    if state.rx >= state.coloff + state.screencols:
        state.coloff = state.rx - state.screencols + 1
