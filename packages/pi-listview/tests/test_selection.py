"""Tests for pi.listview.selection — rectangles, highlighting, word and paragraph bounds."""

from __future__ import annotations

import pytest

from pi.listview.selection import (
    SelectionRect,
    find_paragraph_boundaries,
    find_word_boundaries,
    plain_lines,
    selection_view,
)
from pi.listview.theme import SelectionTheme

THEME = SelectionTheme(foreground="30", background="47")
HL = "\x1b[30;47m"
RESET = "\x1b[0m"


def _rect(start_col: int, start_line: int, end_col: int, end_line: int) -> SelectionRect:
    rect = SelectionRect()
    rect.set(start_col, start_line, end_col, end_line)
    return rect


def _text(view: str, width: int, height: int, rect: SelectionRect) -> str:
    return selection_view(view, width, height, rect, THEME, text_only=True)


# ---------------------------------------------------------------------------
# SelectionRect
# ---------------------------------------------------------------------------


class TestSelectionRect:
    """Coincident endpoints mean no selection."""

    def test_new_rect_is_empty(self):
        assert SelectionRect().is_empty()

    def test_start_is_empty_but_active(self):
        rect = SelectionRect()
        rect.start(2, 1)
        assert rect.is_empty()
        assert rect.active

    def test_extend_while_active(self):
        rect = SelectionRect()
        rect.start(2, 1)
        rect.extend(5, 1)
        assert not rect.is_empty()
        assert (rect.end_col, rect.end_line) == (5, 1)

    def test_extend_after_stop_is_ignored(self):
        rect = SelectionRect()
        rect.start(0, 0)
        rect.extend(3, 0)
        rect.stop()
        rect.extend(9, 9)
        assert (rect.end_col, rect.end_line) == (3, 0)

    def test_clear(self):
        rect = _rect(0, 0, 4, 2)
        rect.clear()
        assert rect.is_empty()
        assert not rect.active

    def test_fixed_single_cell_is_not_empty(self):
        assert not _rect(3, 0, 3, 0).is_empty()

    def test_start_and_clear_drop_fixed_range(self):
        rect = _rect(3, 0, 3, 0)
        rect.start(3, 0)
        assert rect.is_empty()
        rect = _rect(3, 0, 3, 0)
        rect.clear()
        assert rect.is_empty()

    def test_canonical_orders_each_axis(self):
        assert _rect(6, 3, 1, 0).canonical() == (1, 0, 6, 3)
        assert _rect(1, 3, 6, 0).canonical() == (1, 0, 6, 3)

    def test_finished_selection_shifts_whole(self):
        rect = _rect(0, 2, 4, 3)
        rect.shift_lines(-1)
        assert (rect.start_line, rect.end_line) == (1, 2)

    def test_active_drag_shifts_anchor_only(self):
        rect = SelectionRect()
        rect.start(0, 2)
        rect.extend(4, 3)
        rect.shift_lines(-1)
        assert (rect.start_line, rect.end_line) == (1, 3)


# ---------------------------------------------------------------------------
# selection_view: text extraction
# ---------------------------------------------------------------------------


class TestSelectedText:
    """Text-only extraction of the covered cells."""

    def test_single_line(self):
        assert _text("hello world", 11, 1, _rect(0, 0, 4, 0)) == "hello"

    def test_reversed_endpoints(self):
        assert _text("hello world", 11, 1, _rect(4, 0, 0, 0)) == "hello"

    def test_multi_line(self):
        view = "abc\ndef\nghi"
        assert _text(view, 3, 3, _rect(1, 0, 1, 2)) == "bc\ndef\ngh"

    def test_multi_line_reversed(self):
        view = "abc\ndef\nghi"
        assert _text(view, 3, 3, _rect(1, 2, 1, 0)) == "bc\ndef\ngh"

    def test_trailing_padding_not_selected(self):
        assert _text("hi   ", 5, 1, _rect(0, 0, 4, 0)) == "hi"

    def test_ignored_glyphs_skipped(self):
        assert _text("│ hello │", 9, 1, _rect(0, 0, 8, 0)) == "hello"

    def test_blank_line_keeps_paragraph_break(self):
        view = "abc\n   \ndef"
        assert _text(view, 3, 3, _rect(0, 0, 2, 2)) == "abc\n\ndef"

    def test_styled_text(self):
        view = "\x1b[1mbold\x1b[0m text"
        assert _text(view, 9, 1, _rect(0, 0, 3, 0)) == "bold"

    def test_word_in_middle(self):
        assert _text("foo bar baz", 11, 1, _rect(4, 0, 6, 0)) == "bar"

    def test_single_cell_range(self):
        assert _text("a bc d", 6, 1, _rect(0, 0, 0, 0)) == "a"


# ---------------------------------------------------------------------------
# selection_view: highlighting
# ---------------------------------------------------------------------------


class TestSelectionHighlight:
    """Selected cells are restyled; everything else is left alone."""

    def test_highlights_text_only(self):
        out = selection_view("hi   ", 5, 1, _rect(0, 0, 4, 0), THEME)
        assert out == f"{HL}hi{RESET}   "

    def test_partial_line(self):
        out = selection_view("abcd", 4, 1, _rect(1, 0, 2, 0), THEME)
        assert out == f"a{HL}bc{RESET}d"

    def test_background_cells_count_as_text(self):
        out = selection_view("\x1b[44m  \x1b[0mx", 3, 1, _rect(0, 0, 2, 0), THEME)
        assert out == f"{HL}  x{RESET}"

    def test_reversed_rect_matches_canonical(self):
        view = "one two\nthree four\nfive six"
        forward = selection_view(view, 10, 3, _rect(2, 0, 3, 2), THEME)
        reversed_ = selection_view(view, 10, 3, _rect(3, 2, 2, 0), THEME)
        assert forward == reversed_

    def test_unselected_lines_untouched(self):
        out = selection_view("ab\ncd", 2, 2, _rect(0, 1, 1, 1), THEME)
        assert out.split("\n")[0] == "ab"


# ---------------------------------------------------------------------------
# Word boundaries
# ---------------------------------------------------------------------------


class TestFindWordBoundaries:
    """Inclusive column range of the word under a column."""

    @pytest.mark.parametrize(
        ("col", "expected"),
        [(0, (0, 2)), (2, (0, 2)), (4, (4, 6)), (6, (4, 6)), (10, (8, 10))],
    )
    def test_words(self, col, expected):
        assert find_word_boundaries("foo bar baz", col) == expected

    def test_space_yields_nothing(self):
        assert find_word_boundaries("foo bar baz", 3) is None

    def test_past_end_yields_nothing(self):
        assert find_word_boundaries("foo", 10) is None

    def test_punctuation_splits_words(self):
        assert find_word_boundaries("foo.bar", 1) == (0, 2)
        assert find_word_boundaries("foo.bar", 3) == (3, 3)
        assert find_word_boundaries("foo.bar", 5) == (4, 6)

    def test_ansi_ignored(self):
        assert find_word_boundaries("\x1b[1mfoo\x1b[0m bar", 5) == (4, 6)

    def test_wide_graphemes(self):
        assert find_word_boundaries("日本 語", 1) == (0, 3)
        assert find_word_boundaries("日本 語", 6) == (5, 6)


# ---------------------------------------------------------------------------
# Paragraph boundaries
# ---------------------------------------------------------------------------


class TestFindParagraphBoundaries:
    LINES = ["a", "b", "", "c", "   ", "d", "e"]

    def test_paragraph_at_top(self):
        assert find_paragraph_boundaries(self.LINES, 0) == (0, 1)
        assert find_paragraph_boundaries(self.LINES, 1) == (0, 1)

    def test_single_line_paragraph(self):
        assert find_paragraph_boundaries(self.LINES, 3) == (3, 3)

    def test_paragraph_at_bottom(self):
        assert find_paragraph_boundaries(self.LINES, 6) == (5, 6)

    def test_blank_line(self):
        assert find_paragraph_boundaries(self.LINES, 2) is None
        assert find_paragraph_boundaries(self.LINES, 4) is None

    def test_out_of_range(self):
        assert find_paragraph_boundaries(self.LINES, 20) is None
        assert find_paragraph_boundaries(self.LINES, -1) is None


class TestPlainLines:
    def test_strips_styling_and_icons(self):
        assert plain_lines(["\x1b[1m│ x\x1b[0m", "╰──"]) == ["  x", " ──"]

    def test_icon_only_line_is_blank(self):
        lines = plain_lines(["text", "│", "more"])
        assert find_paragraph_boundaries(lines, 0) == (0, 0)
