"""Cursor navigation tests: edge wrapping, paging and column clamping."""

from __future__ import annotations

import random
import unittest

from tildeview.document import Document
from tildeview.input import (
    KEY_DELETE,
    KEY_DOWN,
    KEY_END,
    KEY_HOME,
    KEY_LEFT,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_RIGHT,
    KEY_UP,
)
from tildeview.navigation import move_cursor
from tildeview.state import ViewerState


def _make_state(lines: list[bytes], screenrows: int = 5, screencols: int = 20) -> ViewerState:
    document = Document()
    for line in lines:
        document.append_line(line)
    return ViewerState(document=document, screenrows=screenrows, screencols=screencols)


class CursorNavigationTests(unittest.TestCase):
    def test_left_at_column_zero_moves_to_end_of_previous_row(self) -> None:
        state = _make_state([b"zero", b"one", b"second row", b"three"])
        state.cy = 3
        move_cursor(state, KEY_LEFT)
        self.assertEqual((state.cx, state.cy), (len(b"second row"), 2))

    def test_left_at_origin_is_a_no_op(self) -> None:
        state = _make_state([b"abc"])
        move_cursor(state, KEY_LEFT)
        self.assertEqual((state.cx, state.cy), (0, 0))

    def test_right_wraps_to_next_row_start(self) -> None:
        state = _make_state([b"ab", b"cd"])
        for _ in range(3):
            move_cursor(state, KEY_RIGHT)
        self.assertEqual((state.cx, state.cy), (0, 1))

    def test_right_past_end_of_document_is_ignored(self) -> None:
        state = _make_state([b"ab"])
        state.cy = 1
        move_cursor(state, KEY_RIGHT)
        self.assertEqual((state.cx, state.cy), (0, 1))

    def test_down_stops_one_past_last_row(self) -> None:
        state = _make_state([b"a", b"b"])
        for _ in range(5):
            move_cursor(state, KEY_DOWN)
        self.assertEqual(state.cy, 2)

    def test_up_stops_at_first_row(self) -> None:
        state = _make_state([b"a", b"b"])
        move_cursor(state, KEY_UP)
        self.assertEqual(state.cy, 0)

    def test_vertical_move_clamps_column_to_shorter_row(self) -> None:
        state = _make_state([b"a long line", b"ab", b""])
        move_cursor(state, KEY_END)
        move_cursor(state, KEY_DOWN)
        self.assertEqual((state.cx, state.cy), (2, 1))
        move_cursor(state, KEY_DOWN)
        self.assertEqual((state.cx, state.cy), (0, 2))

    def test_moving_past_end_resets_column(self) -> None:
        state = _make_state([b"abc"])
        move_cursor(state, KEY_END)
        move_cursor(state, KEY_DOWN)
        self.assertEqual((state.cx, state.cy), (0, 1))

    def test_home_and_end(self) -> None:
        state = _make_state([b"hello"])
        move_cursor(state, KEY_END)
        self.assertEqual(state.cx, 5)
        move_cursor(state, KEY_HOME)
        self.assertEqual(state.cx, 0)

    def test_end_past_last_row_keeps_column_zero(self) -> None:
        state = _make_state([b"hello"])
        state.cy = 1
        move_cursor(state, KEY_END)
        self.assertEqual(state.cx, 0)

    def test_non_navigation_keys_are_ignored(self) -> None:
        state = _make_state([b"hello"])
        state.cx = 2
        self.assertFalse(move_cursor(state, KEY_DELETE))
        self.assertFalse(move_cursor(state, "x"))
        self.assertEqual((state.cx, state.cy), (2, 0))

    def test_page_down_matches_repeated_arrow_down(self) -> None:
        lines = [b"x" * (idx % 7) for idx in range(40)]
        for start in (0, 3, 17, 38):
            for pages in (1, 2, 3, 9):
                with self.subTest(start=start, pages=pages):
                    paged = _make_state(lines, screenrows=6)
                    stepped = _make_state(lines, screenrows=6)
                    paged.cy = stepped.cy = start
                    paged.cx = stepped.cx = paged.document.row_length(start)
                    for _ in range(pages):
                        move_cursor(paged, KEY_PAGE_DOWN)
                    for _ in range(pages * 6):
                        move_cursor(stepped, KEY_DOWN)
                    self.assertEqual((paged.cx, paged.cy), (stepped.cx, stepped.cy))

    def test_page_up_matches_repeated_arrow_up(self) -> None:
        lines = [b"row"] * 30
        paged = _make_state(lines, screenrows=4)
        stepped = _make_state(lines, screenrows=4)
        paged.cy = stepped.cy = 25
        move_cursor(paged, KEY_PAGE_UP)
        for _ in range(4):
            move_cursor(stepped, KEY_UP)
        self.assertEqual(paged.cy, stepped.cy)
        self.assertEqual(paged.cy, 21)

    def test_random_walks_keep_cursor_in_document(self) -> None:
        keys = [KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_PAGE_UP, KEY_PAGE_DOWN, KEY_HOME, KEY_END]
        rng = random.Random(1234)
        lines = [b"", b"a\tb", b"longer line here", b"x", b""]
        state = _make_state(lines, screenrows=3)
        for _ in range(2000):
            move_cursor(state, rng.choice(keys))
            self.assertGreaterEqual(state.cy, 0)
            self.assertLessEqual(state.cy, state.numrows)
            self.assertGreaterEqual(state.cx, 0)
            self.assertLessEqual(state.cx, state.document.row_length(state.cy))

    def test_empty_document_keeps_cursor_at_origin(self) -> None:
        state = _make_state([])
        for key in (KEY_DOWN, KEY_RIGHT, KEY_END, KEY_PAGE_DOWN, KEY_LEFT):
            move_cursor(state, key)
        self.assertEqual((state.cx, state.cy), (0, 0))


if __name__ == "__main__":
    unittest.main()
