from __future__ import annotations

from dataclasses import dataclass

from .document import Document


@dataclass
class ViewerState:
    """Process-wide viewer context: document, cursor, viewport and geometry."""

    document: Document
    screenrows: int
    screencols: int
    cx: int = 0
    cy: int = 0
    rx: int = 0
    rowoff: int = 0
    coloff: int = 0
    show_debug_line: bool = True

    @property
    def numrows(self) -> int:
        return self.document.numrows
