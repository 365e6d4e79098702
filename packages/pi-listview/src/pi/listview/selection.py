"""Mouse text selection over the visible list view.

The selection is a screen-space rectangle given by two ``(col, line)``
endpoints relative to the list's top-left corner.  Columns are inclusive on
both ends; coincident drag endpoints mean "no selection", while a fixed
range (word or paragraph) always covers at least one cell.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from pi.listview.cells import ScreenBuffer
from pi.listview.theme import DEFAULT_THEME, SelectionTheme
from pi.listview.utils import (
    graphemes_with_columns,
    is_punctuation_char,
    is_whitespace_char,
    strip_ansi,
)


@dataclass
class SelectionRect:
    start_col: int = -1
    start_line: int = -1
    end_col: int = -1
    end_line: int = -1
    # True while a drag is in progress
    active: bool = False
    # True for a range set by word or paragraph selection
    fixed: bool = False

    def is_empty(self) -> bool:
        if self.fixed:
            return False
        return self.start_col == self.end_col and self.start_line == self.end_line

    def start(self, col: int, line: int) -> None:
        self.start_col = self.end_col = col
        self.start_line = self.end_line = line
        self.active = True
        self.fixed = False

    def extend(self, col: int, line: int) -> None:
        if not self.active:
            return
        self.end_col = col
        self.end_line = line

    def stop(self) -> None:
        self.active = False

    def clear(self) -> None:
        self.start_col = self.start_line = -1
        self.end_col = self.end_line = -1
        self.active = False
        self.fixed = False

    def set(self, start_col: int, start_line: int, end_col: int, end_line: int) -> None:
        """Select a fixed range (word or paragraph); not an active drag.

        Coincident endpoints select the single cell they name.
        """
        self.start_col, self.start_line = start_col, start_line
        self.end_col, self.end_line = end_col, end_line
        self.active = False
        self.fixed = True

    def shift_lines(self, delta: int) -> None:
        """Move the selection with scrolled content.

        A finished selection moves as a whole.  During a drag only the anchor
        moves; the free end stays under the pointer.
        """
        self.start_line += delta
        if not self.active:
            self.end_line += delta

    def canonical(self) -> tuple[int, int, int, int]:
        """Return ``(min_col, min_line, max_col, max_line)``."""
        return (
            min(self.start_col, self.end_col),
            min(self.start_line, self.end_line),
            max(self.start_col, self.end_col),
            max(self.start_line, self.end_line),
        )


def _selection_bounds(
    y: int, rect: tuple[int, int, int, int], width: int
) -> tuple[int, int] | None:
    min_x, min_y, max_x, max_y = rect
    if y < min_y or y > max_y:
        return None
    if min_y == max_y:
        return min_x, max_x
    if y == min_y:
        return min_x, width - 1
    if y == max_y:
        return 0, max_x
    return 0, width - 1


def _text_bounds(scr: ScreenBuffer, y: int, theme: SelectionTheme) -> tuple[int, int]:
    """First real-text column and one past the last, or ``(-1, -1)``.

    Real text is any cell that is neither whitespace nor an ignorable glyph,
    plus any cell carrying a background colour.
    """
    start = end = -1
    for x in range(scr.width):
        cell = scr.cell_at(x, y)
        if cell is None or not cell.text:
            continue
        real = not is_whitespace_char(cell.text[0]) and not theme.is_ignored(cell.text)
        if real or cell.style.bg is not None:
            if start == -1:
                start = x
            end = x + 1
    return start, end


def selection_view(
    view: str,
    width: int,
    height: int,
    rect: SelectionRect,
    theme: SelectionTheme = DEFAULT_THEME,
    text_only: bool = False,
) -> str:
    """Highlight the selected cells of *view*, or extract their text.

    With *text_only* the covered cells are concatenated line by line
    (ignorable glyphs skipped) and the result is stripped; a selected line
    without real text still contributes a line break.
    """
    scr = ScreenBuffer(width, height)
    scr.draw(view)
    bounds = rect.canonical()

    out: list[str] = []
    for y in range(scr.height):
        sel = _selection_bounds(y, bounds, scr.width)
        if sel is None:
            continue

        text_start, text_end = _text_bounds(scr, y, theme)
        if text_start < 0:
            if text_only:
                out.append("\n")
            continue

        scan_start = max(text_start, sel[0])
        scan_end = min(text_end, sel[1] + 1)
        for x in range(scan_start, scan_end):
            cell = scr.cell_at(x, y)
            if cell is None or not cell.text or theme.is_ignored(cell.text):
                continue
            if text_only:
                out.append(cell.text)
                continue
            style = cell.style.with_colors(theme.foreground, theme.background)
            scr.set_cell(x, y, replace(cell, style=style))

        if text_only:
            out.append("\n")

    if text_only:
        return "".join(out).strip()
    return scr.render()


# ---------------------------------------------------------------------------
# Word / paragraph boundaries
# ---------------------------------------------------------------------------

_SPACE, _PUNCT, _WORD = range(3)


def _word_class(g: str) -> int:
    if is_whitespace_char(g):
        return _SPACE
    if is_punctuation_char(g):
        return _PUNCT
    return _WORD


def find_word_boundaries(line: str, col: int) -> tuple[int, int] | None:
    """Inclusive column range of the word under *col* in *line*.

    *line* may contain ANSI codes.  Graphemes are grouped into runs of word
    characters or punctuation; whitespace under *col* yields ``None``.
    """
    cells = graphemes_with_columns(strip_ansi(line))
    target = None
    for k, (start, _g, w) in enumerate(cells):
        if w > 0 and start <= col < start + w:
            target = k
            break
    if target is None:
        return None

    cls = _word_class(cells[target][1])
    if cls == _SPACE:
        return None

    lo = hi = target
    while lo > 0 and _word_class(cells[lo - 1][1]) == cls:
        lo -= 1
    while hi + 1 < len(cells) and _word_class(cells[hi + 1][1]) == cls:
        hi += 1

    last_col, _g, last_w = cells[hi]
    return cells[lo][0], last_col + max(last_w, 1) - 1


def plain_lines(lines: list[str], theme: SelectionTheme = DEFAULT_THEME) -> list[str]:
    """Strip styling and blank out ignorable glyphs, for paragraph detection."""
    result: list[str] = []
    for line in lines:
        plain = strip_ansi(line)
        for icon in theme.ignore_icons:
            if icon in plain:
                plain = plain.replace(icon, " ")
        result.append(plain)
    return result


def find_paragraph_boundaries(lines: list[str], line: int) -> tuple[int, int] | None:
    """Inclusive ``(start, end)`` line range of the paragraph containing *line*.

    *lines* should already be plain text (see ``plain_lines``).  A blank
    line yields ``None``.
    """
    if line < 0 or line >= len(lines) or not lines[line].strip():
        return None

    start = line
    while start > 0 and lines[start - 1].strip():
        start -= 1
    end = line
    while end < len(lines) - 1 and lines[end + 1].strip():
        end += 1
    return start, end
