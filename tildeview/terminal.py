"""Terminal control helpers for the viewer session.

Owns the raw-mode lifecycle (saving and restoring termios attributes), the
screen clear on exit, and the window-size query with its cursor-report
fallback.
"""

from __future__ import annotations

import contextlib
import logging
import os
import re
import select
import termios

from .errors import TerminalModeError, TerminalSizeError

logger = logging.getLogger(__name__)

CLEAR_SCREEN = b"\x1b[2J\x1b[H"
CURSOR_FAR_BOTTOM_RIGHT = b"\x1b[999C\x1b[999B"
CURSOR_POSITION_QUERY = b"\x1b[6n"
CURSOR_REPORT_TIMEOUT_MS = 1000
_CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)$")
_CURSOR_REPORT_MAX_BYTES = 32

# termios attribute list indices.
IFLAG, OFLAG, CFLAG, LFLAG, ISPEED, OSPEED, CC = range(7)


def raw_attributes(saved: list) -> list:
    """Derive raw-mode attributes from ``saved`` without mutating it.

    Input is unbuffered and unechoed, output post-processing is off, and
    signal keys arrive as bytes. Reads return after at most a decisecond.
    """
    raw = list(saved)
    raw[CC] = list(saved[CC])
    raw[IFLAG] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    raw[OFLAG] &= ~termios.OPOST
    raw[CFLAG] |= termios.CS8
    raw[LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
    raw[CC][termios.VMIN] = 0
    raw[CC][termios.VTIME] = 1
    return raw


def parse_cursor_position_report(reply: bytes) -> tuple[int, int] | None:
    """Parse ``ESC [ rows ; cols`` (terminating ``R`` already stripped)."""
    match = _CURSOR_REPORT_RE.match(reply)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


class TerminalController:
    """Manage terminal mode transitions and geometry queries."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalModeError(f"tcgetattr: {exc}") from exc
        self._raw_enabled = False

    def enable_raw_mode(self) -> None:
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw_attributes(self._saved_tty_state))
        except termios.error as exc:
            raise TerminalModeError(f"tcsetattr: {exc}") from exc
        self._raw_enabled = True
        logger.debug("raw mode enabled on fd %d", self.stdin_fd)

    def disable_raw_mode(self) -> None:
        """Clear the screen and restore the attributes captured at startup.

        A failed clear is logged and skipped; the saved attributes are always
        written back.
        """
        try:
            os.write(self.stdout_fd, CLEAR_SCREEN)
        except OSError as exc:
            logger.warning("clear screen failed on fd %d: %s", self.stdout_fd, exc)
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        except termios.error as exc:
            raise TerminalModeError(f"tcsetattr: {exc}") from exc
        self._raw_enabled = False
        logger.debug("terminal restored on fd %d", self.stdin_fd)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with raw enter/exit calls."""
        self.enable_raw_mode()
        try:
            yield
        finally:
            self.disable_raw_mode()

    def poll_window_size(self) -> tuple[int, int] | None:
        """Cheap per-frame size check; ``None`` when the ioctl is unavailable."""
        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            return None
        if size.columns <= 0 or size.lines <= 0:
            return None
        return size.lines, size.columns

    def window_size(self) -> tuple[int, int]:
        """Return ``(rows, columns)`` of the terminal.

        Falls back to moving the cursor far bottom-right and asking the
        terminal where it ended up. Raises ``TerminalSizeError`` if both fail.
        """
        size = self.poll_window_size()
        if size is not None:
            return size
        logger.info("window size ioctl unavailable, querying cursor position")
        result = self._cursor_position_size()
        if result is None:
            raise TerminalSizeError("cannot determine terminal size")
        return result

    def _cursor_position_size(self) -> tuple[int, int] | None:
        try:
            os.write(self.stdout_fd, CURSOR_FAR_BOTTOM_RIGHT + CURSOR_POSITION_QUERY)
        except OSError:
            return None
        reply = bytearray()
        while len(reply) < _CURSOR_REPORT_MAX_BYTES:
            ready, _, _ = select.select([self.stdin_fd], [], [], CURSOR_REPORT_TIMEOUT_MS / 1000.0)
            if not ready:
                break
            ch = os.read(self.stdin_fd, 1)
            if not ch or ch == b"R":
                break
            reply.extend(ch)
        logger.debug("cursor position report %r", bytes(reply))
        return parse_cursor_position_report(bytes(reply))
