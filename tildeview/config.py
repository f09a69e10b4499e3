"""Persistent JSON config helpers.

Holds the viewer's display preferences: tab stop, margin and whether the
empty-document debug line is shown. All access is defensive: malformed or
missing config falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .document import DEFAULT_MARGIN, DEFAULT_TAB_STOP

APP_NAME = "tildeview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

MAX_TAB_STOP = 32
MAX_MARGIN_CHARS = 8


@dataclass(frozen=True)
class ViewerConfig:
    tab_stop: int = DEFAULT_TAB_STOP
    margin: bytes = DEFAULT_MARGIN
    show_debug_line: bool = True


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_tab_stop(data: dict[str, object]) -> int:
    """Return the configured tab stop, accepting integers in ``1..MAX_TAB_STOP``."""
    value = data.get("tab_stop")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_TAB_STOP
    if value < 1 or value > MAX_TAB_STOP:
        return DEFAULT_TAB_STOP
    return value


def load_margin(data: dict[str, object]) -> bytes:
    """Return the configured margin; only printable ASCII, one byte per column."""
    value = data.get("margin")
    if not isinstance(value, str) or len(value) > MAX_MARGIN_CHARS:
        return DEFAULT_MARGIN
    if not all(" " <= ch < "\x7f" for ch in value):
        return DEFAULT_MARGIN
    return value.encode("ascii")


def load_show_debug_line(data: dict[str, object]) -> bool:
    value = data.get("show_debug_line")
    return value if isinstance(value, bool) else True


def load_viewer_config() -> ViewerConfig:
    data = load_config()
    return ViewerConfig(
        tab_stop=load_tab_stop(data),
        margin=load_margin(data),
        show_debug_line=load_show_debug_line(data),
    )
