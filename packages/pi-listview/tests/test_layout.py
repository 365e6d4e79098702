"""Tests for pi.listview.layout — viewport math and the rendered buffer."""

from __future__ import annotations

import pytest

from pi.listview.layout import (
    EMPTY_RANGE,
    Direction,
    RenderedBuffer,
    clamp_offset,
    max_offset,
    view_position,
)


# ---------------------------------------------------------------------------
# view_position
# ---------------------------------------------------------------------------


class TestViewPositionForward:
    """Forward direction anchors the offset at the top of the buffer."""

    def test_top(self):
        assert view_position(0, 3, Direction.FORWARD, 10) == (0, 2)

    def test_bottom(self):
        assert view_position(7, 3, Direction.FORWARD, 10) == (7, 9)

    def test_end_clamped_to_last_line(self):
        assert view_position(9, 3, Direction.FORWARD, 10) == (9, 9)

    def test_content_shorter_than_viewport(self):
        assert view_position(0, 5, Direction.FORWARD, 2) == (0, 1)


class TestViewPositionBackward:
    """Backward direction anchors the offset at the bottom of the buffer."""

    def test_bottom(self):
        assert view_position(0, 3, Direction.BACKWARD, 10) == (7, 9)

    def test_scrolled_up(self):
        assert view_position(2, 3, Direction.BACKWARD, 10) == (5, 7)

    def test_top(self):
        assert view_position(7, 3, Direction.BACKWARD, 10) == (0, 2)

    def test_content_shorter_than_viewport(self):
        assert view_position(0, 5, Direction.BACKWARD, 2) == (0, 1)


class TestViewPositionDegenerate:
    @pytest.mark.parametrize("direction", list(Direction))
    def test_zero_height(self, direction):
        assert view_position(0, 0, direction, 10) == EMPTY_RANGE

    @pytest.mark.parametrize("direction", list(Direction))
    def test_no_content(self, direction):
        assert view_position(0, 3, direction, 0) == EMPTY_RANGE


class TestOffsetBounds:
    def test_max_offset(self):
        assert max_offset(10, 3) == 7
        assert max_offset(2, 3) == 0

    def test_clamp(self):
        assert clamp_offset(-4, 10, 3) == 0
        assert clamp_offset(50, 10, 3) == 7
        assert clamp_offset(4, 10, 3) == 4


# ---------------------------------------------------------------------------
# RenderedBuffer
# ---------------------------------------------------------------------------


def _buffer(text: str) -> RenderedBuffer:
    buf = RenderedBuffer()
    buf.set(text)
    return buf


class TestRenderedBufferGetLines:
    """get_lines slices inclusive line ranges through the offset index."""

    def test_height(self):
        assert _buffer("a\nb\nc").height == 3
        assert _buffer("").height == 0

    def test_inner_range(self):
        assert _buffer("a\nb\nc\nd").get_lines(1, 2) == "b\nc"

    def test_single_line(self):
        assert _buffer("a\nb\nc").get_lines(2, 2) == "c"

    def test_end_clamped(self):
        assert _buffer("a\nb\nc").get_lines(1, 10) == "b\nc"

    def test_start_out_of_range(self):
        assert _buffer("a\nb").get_lines(5, 6) == ""

    def test_inverted_range(self):
        assert _buffer("a\nb\nc").get_lines(2, 1) == ""

    def test_empty_lines_preserved(self):
        assert _buffer("a\n\nb").get_lines(0, 2) == "a\n\nb"


class TestRenderedBufferEditing:
    """extend and splice keep the line index consistent with the text."""

    def test_extend(self):
        buf = _buffer("a\n")
        buf.extend("b\nc")
        assert buf.text == "a\nb\nc"
        assert buf.height == 3
        assert buf.get_lines(1, 2) == "b\nc"

    def test_extend_empty_buffer(self):
        buf = RenderedBuffer()
        buf.extend("x\ny")
        assert buf.get_lines(0, 1) == "x\ny"

    def test_splice_replaces_tail(self):
        buf = _buffer("a\nb\nc\nd")
        buf.splice(2, "\nX\nY")
        assert buf.text == "a\nb\nX\nY"
        assert buf.get_lines(2, 3) == "X\nY"

    def test_splice_truncates(self):
        buf = _buffer("a\nb\nc")
        buf.splice(1, "")
        assert buf.text == "a"
        assert buf.height == 1

    def test_splice_from_zero_replaces_all(self):
        buf = _buffer("a\nb")
        buf.splice(0, "z")
        assert buf.text == "z"

    def test_index_matches_full_rebuild(self):
        incremental = _buffer("one\ntwo\n")
        incremental.extend("three\n\nfour")
        incremental.splice(3, "\n\nfive\nsix")

        rebuilt = _buffer(incremental.text)
        assert incremental.line_offsets == rebuilt.line_offsets
        lines = incremental.text.split("\n")
        for start in range(len(lines)):
            for end in range(start, len(lines)):
                expected = "\n".join(lines[start : end + 1])
                assert incremental.get_lines(start, end) == expected

    def test_lines(self):
        assert _buffer("a\nb").lines() == ["a", "b"]
        assert RenderedBuffer().lines() == []
