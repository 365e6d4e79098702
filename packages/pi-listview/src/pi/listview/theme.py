"""Selection styling and the set of glyphs that selection skips over."""

from __future__ import annotations

from dataclasses import dataclass, field

# Decorative glyphs (borders, bullets, status icons) that items draw around
# their text.  They never count as selectable text.
DEFAULT_IGNORE_ICONS: frozenset[str] = frozenset(
    {
        "│",
        "┃",
        "▌",
        "▐",
        "╭",
        "╮",
        "╰",
        "╯",
        "●",
        "○",
        "◆",
        "◇",
        "✓",
        "✗",
        "⋮",
        "⎿",
    }
)


@dataclass(frozen=True)
class SelectionTheme:
    """Colours applied to selected cells.

    ``foreground`` and ``background`` are SGR parameter strings such as
    ``"30"`` or ``"48;5;117"``.
    """

    foreground: str = "38;5;235"
    background: str = "48;5;117"
    ignore_icons: frozenset[str] = field(default=DEFAULT_IGNORE_ICONS)

    def is_ignored(self, cell_text: str) -> bool:
        return cell_text in self.ignore_icons


DEFAULT_THEME = SelectionTheme()
