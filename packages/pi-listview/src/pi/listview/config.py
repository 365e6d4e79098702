"""List construction options.

Options can be built directly or from a camelCase settings dictionary as
stored in the host's JSON settings file.  Unknown keys and ``None`` values
are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pi.listview.keybindings import ListKeybindingsManager
from pi.listview.layout import Direction
from pi.listview.theme import DEFAULT_THEME, SelectionTheme

# settings key -> ListOptions field
_SETTINGS_KEYS: dict[str, str] = {
    "width": "width",
    "height": "height",
    "gap": "gap",
    "wrapNavigation": "wrap_navigation",
    "selectedItem": "selected_item",
    "focused": "focused",
    "resizeByList": "resize_by_list",
    "enableMouse": "enable_mouse",
}


@dataclass
class ListOptions:
    """Geometry and behaviour of a ``LazyList``."""

    width: int = 0
    height: int = 0
    # Blank lines between consecutive items
    gap: int = 0
    wrap_navigation: bool = False
    direction: Direction = Direction.FORWARD
    selected_item: str = ""
    focused: bool = True
    # Return raw visible lines instead of padding them to the viewport box
    resize_by_list: bool = False
    enable_mouse: bool = False
    keybindings: ListKeybindingsManager | None = None
    theme: SelectionTheme = field(default=DEFAULT_THEME)

    def __post_init__(self) -> None:
        self.gap = max(0, self.gap)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> ListOptions:
        """Build options from a settings dict such as ``{"gap": 1, "direction": "backward"}``."""
        kwargs: dict[str, Any] = {}
        for key, attr in _SETTINGS_KEYS.items():
            value = settings.get(key)
            if value is not None:
                kwargs[attr] = value

        direction = settings.get("direction")
        if direction is not None:
            kwargs["direction"] = parse_direction(direction)

        bindings = settings.get("keybindings")
        if bindings:
            kwargs["keybindings"] = ListKeybindingsManager(bindings)

        return cls(**kwargs)


def parse_direction(value: str | Direction) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return Direction(value.lower())
    except ValueError:
        raise ValueError(
            f"invalid list direction {value!r}, expected 'forward' or 'backward'"
        ) from None
