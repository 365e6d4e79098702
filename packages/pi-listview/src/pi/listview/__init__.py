"""pi-listview: Virtualized, scrollable terminal list with mouse text selection."""

# Commands
from pi.listview.commands import (
    BatchMsg,
    Cmd,
    CommandRunner,
    SequenceMsg,
    batch,
    execute,
    sequence,
)

# Configuration
from pi.listview.config import ListOptions, parse_direction

# Item capabilities
from pi.listview.item import (
    Animatable,
    Focusable,
    Indexable,
    Item,
    is_animatable,
    is_focusable,
)

# Keybindings
from pi.listview.keybindings import (
    DEFAULT_LIST_KEYBINDINGS,
    ListAction,
    ListKeybindingsManager,
    get_list_keybindings,
    set_list_keybindings,
)

# Layout
from pi.listview.layout import Direction, RenderedBuffer, max_offset, view_position

# Widget
from pi.listview.lazy_list import VIEWPORT_SCROLL_SIZE, LazyList

# Messages
from pi.listview.messages import (
    AnimStepMsg,
    ContinueRenderMsg,
    KeyPressMsg,
    MouseClickMsg,
    MouseMotionMsg,
    MouseReleaseMsg,
    MouseWheelMsg,
)

# Selection
from pi.listview.selection import (
    SelectionRect,
    find_paragraph_boundaries,
    find_word_boundaries,
    selection_view,
)

# Store
from pi.listview.store import ItemStore

# Theme
from pi.listview.theme import DEFAULT_IGNORE_ICONS, DEFAULT_THEME, SelectionTheme

# Utilities
from pi.listview.utils import strip_ansi, truncate_to_width, visible_width

__all__ = [
    # Commands
    "BatchMsg",
    "Cmd",
    "CommandRunner",
    "SequenceMsg",
    "batch",
    "execute",
    "sequence",
    # Configuration
    "ListOptions",
    "parse_direction",
    # Item capabilities
    "Animatable",
    "Focusable",
    "Indexable",
    "Item",
    "is_animatable",
    "is_focusable",
    # Keybindings
    "DEFAULT_LIST_KEYBINDINGS",
    "ListAction",
    "ListKeybindingsManager",
    "get_list_keybindings",
    "set_list_keybindings",
    # Layout
    "Direction",
    "RenderedBuffer",
    "max_offset",
    "view_position",
    # Widget
    "LazyList",
    "VIEWPORT_SCROLL_SIZE",
    # Messages
    "AnimStepMsg",
    "ContinueRenderMsg",
    "KeyPressMsg",
    "MouseClickMsg",
    "MouseMotionMsg",
    "MouseReleaseMsg",
    "MouseWheelMsg",
    # Selection
    "SelectionRect",
    "find_paragraph_boundaries",
    "find_word_boundaries",
    "selection_view",
    # Store
    "ItemStore",
    # Theme
    "DEFAULT_IGNORE_ICONS",
    "DEFAULT_THEME",
    "SelectionTheme",
    # Utilities
    "strip_ansi",
    "truncate_to_width",
    "visible_width",
]
