"""Row store for the loaded document.

Each row keeps its raw bytes plus a cached render form: the margin prefix
followed by the content with tabs expanded to spaces. The cache is rebuilt
whole whenever content is assigned, and ``column_to_render_column`` uses the
same tab-stop arithmetic so cursor and render columns always agree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import DocumentLoadError

DEFAULT_TAB_STOP = 8
DEFAULT_MARGIN = b"~ "
TAB = 0x09
_LINE_TERMINATORS = b"\r\n"


def next_tab_stop(column: int, tab_stop: int) -> int:
    """Return the first tab-stop boundary strictly after ``column``."""
    return column + (tab_stop - column % tab_stop)


def render_row_bytes(content: bytes, margin: bytes, tab_stop: int) -> bytes:
    out = bytearray(margin)
    for byte in content:
        if byte == TAB:
            out.extend(b" " * (next_tab_stop(len(out), tab_stop) - len(out)))
        else:
            out.append(byte)
    return bytes(out)


class Row:
    """One document line and its derived render cache."""

    def __init__(
        self,
        content: bytes,
        margin: bytes = DEFAULT_MARGIN,
        tab_stop: int = DEFAULT_TAB_STOP,
    ) -> None:
        self.margin = margin
        self.tab_stop = tab_stop
        self._content = bytes(content)
        self._render = b""
        self.update()

    def __repr__(self) -> str:
        return f"Row({self._content!r})"

    @property
    def content(self) -> bytes:
        return self._content

    @content.setter
    def content(self, value: bytes) -> None:
        self._content = bytes(value)
        self.update()

    @property
    def render(self) -> bytes:
        return self._render

    @property
    def size(self) -> int:
        return len(self._content)

    @property
    def rsize(self) -> int:
        return len(self._render)

    def update(self) -> None:
        """Rebuild ``render`` from scratch from the current content and margin."""
        self._render = render_row_bytes(self._content, self.margin, self.tab_stop)


def column_to_render_column(row: Row, cx: int) -> int:
    """Map a content byte index to its column in ``row.render``.

    Starts at the margin width; every byte advances one column except tabs,
    which first jump to the next tab stop. Matches ``render_row_bytes``.
    """
    rx = len(row.margin)
    for byte in row.content[:cx]:
        if byte == TAB:
            rx = next_tab_stop(rx, row.tab_stop)
        else:
            rx += 1
    return rx


def strip_line_terminators(data: bytes) -> bytes:
    return data.rstrip(_LINE_TERMINATORS)


@dataclass
class Document:
    """Append-only ordered sequence of rows sharing one margin and tab stop."""

    margin: bytes = DEFAULT_MARGIN
    tab_stop: int = DEFAULT_TAB_STOP
    rows: list[Row] = field(default_factory=list)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def append_line(self, data: bytes) -> Row:
        row = Row(strip_line_terminators(data), margin=self.margin, tab_stop=self.tab_stop)
        self.rows.append(row)
        return row

    def row_at(self, index: int) -> Row | None:
        """Return the row at ``index`` or ``None`` for past-the-end positions."""
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def row_length(self, index: int) -> int:
        row = self.row_at(index)
        return row.size if row is not None else 0


def load_document(
    path: Path,
    *,
    margin: bytes = DEFAULT_MARGIN,
    tab_stop: int = DEFAULT_TAB_STOP,
) -> Document:
    """Read ``path`` line by line into a new document.

    Raises ``DocumentLoadError`` when the file cannot be opened or read.
    """
    document = Document(margin=margin, tab_stop=tab_stop)
    try:
        with open(path, "rb") as handle:
            for line in handle:
                document.append_line(line)
    except OSError as exc:
        raise DocumentLoadError(f"cannot open {path}: {exc.strerror or exc}") from exc
    return document
