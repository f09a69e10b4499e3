"""Fatal error types raised by terminal and document collaborators.

Decode problems are never errors; these cover the conditions that end the
session after the terminal has been restored.
"""

from __future__ import annotations


class ViewerError(Exception):
    """Base class for conditions that terminate the viewer."""


class TerminalModeError(ViewerError):
    """Entering or restoring raw mode failed."""


class TerminalSizeError(ViewerError):
    """Neither the window-size query nor the cursor report gave a geometry."""


class DocumentLoadError(ViewerError):
    """The requested file could not be opened or read."""


class TerminalInputClosed(ViewerError):
    """Standard input reached end of file while waiting for a key."""
