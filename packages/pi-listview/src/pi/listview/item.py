"""Item capability protocols.

Every list item implements ``Item``.  Focus, animation and index tracking are
optional capabilities, detected per item with ``isinstance`` against the
runtime-checkable protocols below.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pi.listview.commands import Cmd


@runtime_checkable
class Item(Protocol):
    """A renderable list entry with a stable identifier."""

    def id(self) -> str:
        """Stable identifier, unique within a list."""
        ...

    def init(self) -> Cmd | None:
        """Called once when the item is handed to a list."""
        ...

    def update(self, msg: object) -> tuple[Item, Cmd | None]:
        """Handle *msg* and return the (possibly new) item plus a follow-up."""
        ...

    def view(self) -> str:
        """Rendered text, one terminal line per ``\\n``-separated line."""
        ...

    def set_size(self, width: int, height: int) -> Cmd | None:
        ...

    def get_size(self) -> tuple[int, int]:
        ...


@runtime_checkable
class Focusable(Protocol):
    """An item that can receive keyboard focus and take part in navigation."""

    def focus(self) -> Cmd | None:
        ...

    def blur(self) -> Cmd | None:
        ...

    def is_focused(self) -> bool:
        ...


@runtime_checkable
class Animatable(Protocol):
    """An item that animates on periodic ticks while ``spinning()``."""

    def spinning(self) -> bool:
        ...


@runtime_checkable
class Indexable(Protocol):
    """An item that wants to know its current position in the list."""

    def set_index(self, index: int) -> None:
        ...


def is_focusable(item: object | None) -> bool:
    """Type-guard: return ``True`` if *item* implements ``Focusable``."""
    return item is not None and isinstance(item, Focusable)


def is_animatable(item: object | None) -> bool:
    return item is not None and isinstance(item, Animatable)
