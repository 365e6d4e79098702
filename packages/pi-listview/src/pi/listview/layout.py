"""Viewport math and the flattened rendered buffer.

Line 0 of the rendered buffer is always the top of the first item.  The
direction decides where the scroll offset is anchored: at the top
(``FORWARD``) or at the bottom (``BACKWARD``).
"""

from __future__ import annotations

import enum


class Direction(enum.Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


EMPTY_RANGE = (0, -1)


def view_position(
    offset: int,
    height: int,
    direction: Direction,
    total_height: int,
) -> tuple[int, int]:
    """Return the inclusive ``(start, end)`` buffer line range that is visible.

    An empty view is reported as ``(0, -1)``.
    """
    if height <= 0 or total_height <= 0:
        return EMPTY_RANGE

    last_line = total_height - 1
    if direction is Direction.FORWARD:
        start = max(0, offset)
        end = min(offset + height - 1, last_line)
    else:
        end = max(0, last_line - offset)
        start = max(0, end - height + 1)
    return min(start, end), end


def max_offset(total_height: int, height: int) -> int:
    return max(0, total_height - height)


def clamp_offset(offset: int, total_height: int, height: int) -> int:
    return max(0, min(offset, max_offset(total_height, height)))


class RenderedBuffer:
    """Rendered text plus the character offset at which every line starts.

    The offset index makes ``get_lines`` a pair of lookups and a single
    slice, independent of how many lines the buffer holds.
    """

    def __init__(self) -> None:
        self.text = ""
        self.line_offsets: list[int] = []

    @property
    def height(self) -> int:
        return len(self.line_offsets)

    def clear(self) -> None:
        self.text = ""
        self.line_offsets = []

    def set(self, text: str) -> None:
        """Replace the whole buffer and rebuild the line index."""
        self.text = text
        self.line_offsets = [0] if text else []
        self._index_newlines(text, 0)

    def extend(self, more: str) -> None:
        """Append *more* to the buffer, indexing only the new text."""
        if not self.text:
            self.set(more)
            return
        base = len(self.text)
        self.text += more
        self._index_newlines(more, base)

    def splice(self, keep_lines: int, tail: str) -> None:
        """Keep the first *keep_lines* lines and replace everything after.

        The kept prefix ends right after the last character of line
        ``keep_lines - 1``; *tail* normally starts with the newline(s) that
        separate it from the next item.
        """
        if keep_lines <= 0 or not self.text:
            self.set(tail)
            return
        if keep_lines >= self.height:
            cut = len(self.text)
        else:
            cut = self.line_offsets[keep_lines] - 1
        self.text = self.text[:cut] + tail
        del self.line_offsets[keep_lines:]
        self._index_newlines(tail, cut)

    def _index_newlines(self, text: str, base: int) -> None:
        idx = text.find("\n")
        while idx != -1:
            self.line_offsets.append(base + idx + 1)
            idx = text.find("\n", idx + 1)

    def get_lines(self, start: int, end: int) -> str:
        """Return lines ``start..end`` (inclusive) joined by newlines.

        *end* is clamped to the last line; an out-of-range *start* yields
        an empty string.
        """
        if not self.line_offsets or start < 0 or start >= len(self.line_offsets):
            return ""
        end = min(end, len(self.line_offsets) - 1)
        if start > end:
            return ""

        start_offset = self.line_offsets[start]
        if end + 1 < len(self.line_offsets):
            end_offset = self.line_offsets[end + 1] - 1
        else:
            end_offset = len(self.text)
        return self.text[start_offset:end_offset]

    def lines(self) -> list[str]:
        return self.text.split("\n") if self.text else []
