"""Main interactive cycle for the viewer.

One iteration: refresh geometry, clamp the viewport, write one frame, block
for one key, apply it. The cycle ends when a quit key arrives.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .input import read_key
from .navigation import move_cursor
from .render import write_frame
from .scroll import recompute_scroll
from .state import ViewerState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

CTRL_C = "\x03"
CTRL_Q = "\x11"
QUIT_KEYS = frozenset({CTRL_C, CTRL_Q})


@dataclass(frozen=True)
class RuntimeLoopIO:
    """Injected input/output primitives used by ``run_main_loop``."""

    read_key: Callable[[int], str] = read_key
    write_frame: Callable[[int, ViewerState], None] = write_frame


def _refresh_geometry(state: ViewerState, terminal: TerminalController) -> None:
    size = terminal.poll_window_size()
    if size is None:
        return
    rows, cols = size
    if (rows, cols) != (state.screenrows, state.screencols):
        logger.debug("terminal resized to %dx%d", rows, cols)
        state.screenrows, state.screencols = rows, cols


def handle_key(state: ViewerState, key: str) -> bool:
    """Apply one key to ``state``; return ``False`` when the viewer should quit."""
    if key in QUIT_KEYS:
        return False
    move_cursor(state, key)
    return True


def run_main_loop(
    state: ViewerState,
    terminal: TerminalController,
    stdin_fd: int,
    stdout_fd: int,
    io: RuntimeLoopIO | None = None,
) -> None:
    """Run the viewer until a quit key is read.

    Must be called while ``terminal`` is in raw mode; restoring the terminal
    is the caller's job.
    """
    ops = io or RuntimeLoopIO()
    while True:
        _refresh_geometry(state, terminal)
        recompute_scroll(state)
        ops.write_frame(stdout_fd, state)
        key = ops.read_key(stdin_fd)
        if not handle_key(state, key):
            logger.info("quit requested")
            return
