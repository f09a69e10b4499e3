"""Command-line front door for tildeview.

Parses CLI options, loads the document, and runs the interactive viewer inside
raw mode. Fatal errors are reported only after the terminal is restored.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import signal
import sys
from pathlib import Path

from . import __version__
from .config import ViewerConfig, load_viewer_config
from .document import Document, load_document
from .errors import ViewerError
from .logging_config import setup_logging
from .loop import run_main_loop
from .render import render_rows
from .state import ViewerState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_render_width() -> int:
    """Resolve default render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def _raise_system_exit(signum, _frame) -> None:
    raise SystemExit(128 + signum)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tildeview",
        description="View a file in the terminal with a movable cursor (Ctrl-Q quits).",
    )
    parser.add_argument("path", nargs="?", default=None, help="File to view. Starts empty when omitted.")
    parser.add_argument("--render", metavar="PATH", help="Print rendered rows of PATH and exit.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --render output (default: terminal width).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log file verbosity.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def open_document(path: Path | None, config: ViewerConfig) -> Document:
    if path is None:
        return Document(margin=config.margin, tab_stop=config.tab_stop)
    return load_document(path, margin=config.margin, tab_stop=config.tab_stop)


def render_document(path: Path, config: ViewerConfig, max_cols: int) -> bytes:
    """Render rows of ``path`` as newline-separated bytes for ``--render``."""
    document = open_document(path, config)
    return b"".join(row + b"\n" for row in render_rows(document, max_cols))


def run_viewer(
    path: Path | None,
    config: ViewerConfig,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
) -> None:
    """Load ``path`` and run the interactive session, by default on stdin/stdout."""
    if stdin_fd is None:
        stdin_fd = sys.stdin.fileno()
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    with terminal.raw_mode():
        rows, cols = terminal.window_size()
        document = open_document(path, config)
        logger.info("loaded %d rows from %s", document.numrows, path)
        state = ViewerState(
            document=document,
            screenrows=rows,
            screencols=cols,
            show_debug_line=config.show_debug_line,
        )
        run_main_loop(state, terminal, stdin_fd, stdout_fd)


def main() -> None:
    """Parse CLI arguments and launch the viewer.

    Any fatal condition exits with status 1 and a one-line diagnostic after
    the terminal has been put back the way it was found.
    """
    args = build_parser().parse_args()
    setup_logging(args.log_level)
    config = load_viewer_config()

    try:
        if args.render is not None:
            if args.path is not None:
                raise SystemExit("Cannot combine positional path with --render.")
            max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
            sys.stdout.buffer.write(render_document(Path(args.render), config, max_cols))
            sys.stdout.flush()
            return

        signal.signal(signal.SIGTERM, _raise_system_exit)
        path = Path(args.path) if args.path is not None else None
        run_viewer(path, config)
    except (ViewerError, OSError) as exc:
        logger.exception("fatal error")
        raise SystemExit(f"tildeview: {exc}") from exc


if __name__ == "__main__":
    main()
