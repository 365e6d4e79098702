"""Terminal cell grid used by the selection engine.

Styled text is drawn onto a fixed ``width x height`` grid of cells.  Each cell
holds one grapheme cluster plus the SGR style that was active when it was
written.  Wide graphemes occupy their cell and an empty continuation cell to
the right.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import grapheme

from pi.listview.utils import extract_ansi_code, grapheme_width

_RESET = "\x1b[0m"

# SGR attribute code -> codes switched off by it
_ATTR_OFF: dict[int, tuple[int, ...]] = {
    22: (1, 2),
    23: (3,),
    24: (4,),
    25: (5,),
    27: (7,),
    28: (8,),
    29: (9,),
}
_ATTR_ON = frozenset({1, 2, 3, 4, 5, 7, 8, 9})


@dataclass(frozen=True)
class CellStyle:
    """Immutable snapshot of the SGR state of a cell."""

    attrs: frozenset[int] = frozenset()
    fg: str | None = None
    bg: str | None = None

    def is_default(self) -> bool:
        return not self.attrs and self.fg is None and self.bg is None

    def sgr(self) -> str:
        params = [str(a) for a in sorted(self.attrs)]
        if self.fg is not None:
            params.append(self.fg)
        if self.bg is not None:
            params.append(self.bg)
        if not params:
            return ""
        return f"\x1b[{';'.join(params)}m"

    def with_colors(self, fg: str | None, bg: str | None) -> CellStyle:
        return replace(self, fg=fg, bg=bg)


DEFAULT_STYLE = CellStyle()


class StyleTracker:
    """Track the active SGR state while scanning styled text."""

    def __init__(self) -> None:
        self._attrs: set[int] = set()
        self._fg: str | None = None
        self._bg: str | None = None

    def clear(self) -> None:
        self._attrs.clear()
        self._fg = None
        self._bg = None

    def process(self, code: str) -> None:
        """Update tracked state from an SGR sequence like ``\\x1b[1;31m``."""
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        params = code[2:-1].split(";") if len(code) > 3 else [""]
        i = 0
        while i < len(params):
            val = int(params[i]) if params[i] else 0

            if val == 0:
                self.clear()
            elif val in _ATTR_ON:
                self._attrs.add(val)
            elif val in _ATTR_OFF:
                self._attrs.difference_update(_ATTR_OFF[val])
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self._fg = str(val)
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self._bg = str(val)
            elif val == 39:
                self._fg = None
            elif val == 49:
                self._bg = None
            elif val in (38, 48):
                color, consumed = _extended_color(params, i)
                if color is not None:
                    if val == 38:
                        self._fg = color
                    else:
                        self._bg = color
                i += consumed

            i += 1

    def snapshot(self) -> CellStyle:
        if not self._attrs and self._fg is None and self._bg is None:
            return DEFAULT_STYLE
        return CellStyle(frozenset(self._attrs), self._fg, self._bg)


def _extended_color(params: list[str], i: int) -> tuple[str | None, int]:
    """Parse a 256-colour or RGB colour following ``38``/``48`` at *i*."""
    if i + 1 >= len(params):
        return None, 0
    mode = params[i + 1]
    if mode == "5" and i + 2 < len(params):
        return f"{params[i]};5;{params[i + 2]}", 2
    if mode == "2" and i + 4 < len(params):
        r, g, b = params[i + 2 : i + 5]
        return f"{params[i]};2;{r};{g};{b}", 4
    return None, 1


@dataclass(frozen=True)
class Cell:
    text: str
    width: int = 1
    style: CellStyle = DEFAULT_STYLE

    def is_continuation(self) -> bool:
        return self.width == 0 and not self.text


_BLANK = Cell(" ")
_CONTINUATION = Cell("", 0)


class ScreenBuffer:
    """A ``width x height`` grid of cells."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._rows: list[list[Cell]] = [
            [_BLANK] * self.width for _ in range(self.height)
        ]

    def cell_at(self, x: int, y: int) -> Cell | None:
        if 0 <= y < self.height and 0 <= x < self.width:
            return self._rows[y][x]
        return None

    def set_cell(self, x: int, y: int, cell: Cell) -> None:
        if 0 <= y < self.height and 0 <= x < self.width:
            self._rows[y][x] = cell

    def draw(self, styled: str) -> None:
        """Draw *styled* text from the top-left corner, clipping at the edges.

        SGR state carries over line breaks, as it does on a real terminal.
        """
        tracker = StyleTracker()
        for y, line in enumerate(styled.split("\n")):
            if y >= self.height:
                break
            self._draw_line(y, line, tracker)

    def _draw_line(self, y: int, line: str, tracker: StyleTracker) -> None:
        row = self._rows[y]
        x = 0
        i = 0
        run_start = 0

        def place(text: str) -> None:
            nonlocal x
            for g in grapheme.graphemes(text.replace("\t", "   ")):
                w = grapheme_width(g)
                if w == 0:
                    continue
                if x + w > self.width:
                    return
                row[x] = Cell(g, w, tracker.snapshot())
                for k in range(1, w):
                    row[x + k] = _CONTINUATION
                x += w

        while i < len(line):
            extracted = extract_ansi_code(line, i)
            if extracted is None:
                i += 1
                continue
            place(line[run_start:i])
            code, length = extracted
            tracker.process(code)
            i += length
            run_start = i
        place(line[run_start:])

    def render(self) -> str:
        """Render the grid back to styled text, one line per row."""
        lines: list[str] = []
        for row in self._rows:
            parts: list[str] = []
            current = DEFAULT_STYLE
            for cell in row:
                if cell.is_continuation():
                    continue
                if cell.style != current:
                    if not current.is_default():
                        parts.append(_RESET)
                    parts.append(cell.style.sgr())
                    current = cell.style
                parts.append(cell.text)
            if not current.is_default():
                parts.append(_RESET)
            lines.append("".join(parts))
        return "\n".join(lines)
