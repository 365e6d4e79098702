"""Focus and scroll policies for keyboard navigation.

Distinct "is the item in view" predicates are used on purpose:

* explicit navigation (selecting an item) wants the item fully visible, so
  it scrolls unless the item fully covers the viewport or the viewport fully
  contains the item;
* passive renders only scroll when neither edge of the item is visible;
* passive re-selection while scrolling moves the selection once the
  selected item's midpoint leaves the viewport.
"""

from __future__ import annotations

from typing import Callable

from pi.listview.item import is_focusable
from pi.listview.layout import Direction
from pi.listview.render import RenderCache, RenderedItem
from pi.listview.store import ItemStore

ITEM_NOT_FOUND = -1


def first_focusable_above(store: ItemStore, index: int, wrap: bool = False) -> int:
    """Index of the nearest focusable item above *index*.

    With *wrap*, the search continues from the bottom of the list when the
    top is reached without a match.
    """
    for i in range(index - 1, -1, -1):
        if is_focusable(store.get(i)):
            return i
    if wrap:
        for i in range(len(store) - 1, index, -1):
            if is_focusable(store.get(i)):
                return i
    return ITEM_NOT_FOUND


def first_focusable_below(store: ItemStore, index: int, wrap: bool = False) -> int:
    """Index of the nearest focusable item below *index*, wrapping to the top with *wrap*."""
    for i in range(index + 1, len(store)):
        if is_focusable(store.get(i)):
            return i
    if wrap:
        for i in range(0, min(index, len(store))):
            if is_focusable(store.get(i)):
                return i
    return ITEM_NOT_FOUND


def scroll_offset_for(
    rendered: RenderedItem,
    view: tuple[int, int],
    viewport_height: int,
    total_height: int,
    direction: Direction,
    strict: bool,
) -> int | None:
    """Offset that brings *rendered* into view, or ``None`` if no scroll is needed.

    *strict* selects the explicit-navigation predicate (item fully visible);
    otherwise any visible edge counts as in view.
    """
    start, end = view
    if rendered.start <= start and rendered.end >= end:
        return None
    if strict:
        if rendered.start >= start and rendered.end <= end:
            return None
    elif start <= rendered.start <= end or start <= rendered.end <= end:
        return None

    forward = direction is Direction.FORWARD
    last_line = total_height - 1

    if rendered.height >= viewport_height:
        # Fill the viewport from the item's leading edge
        if forward:
            return rendered.start
        return max(0, total_height - (rendered.start + viewport_height))

    if rendered.start < start:
        if forward:
            return rendered.start
        return max(0, last_line - rendered.start - viewport_height + 1)
    if rendered.end > end:
        if forward:
            return max(0, rendered.end - viewport_height + 1)
        return max(0, last_line - rendered.end)
    return None


def reselect_on_scroll(
    store: ItemStore,
    cache: RenderCache,
    selected_id: str,
    view: tuple[int, int],
) -> str | None:
    """Pick a new selection after the viewport scrolled away from the selected item.

    The search never wraps past either end of the list.  Returns the
    identifier to select, or ``None`` to keep the current one.
    """
    current = cache.get(selected_id)
    index = store.index_of(selected_id)
    if current is None or index is None:
        return None

    start, end = view
    if current.start <= start and current.end >= end:
        return None
    if current.start >= start and current.end <= end:
        return None

    middle = current.start + current.height // 2
    step: Callable[[ItemStore, int], int]
    if middle < start:
        step = first_focusable_below

        def edge_in_view(r: RenderedItem) -> bool:
            return start <= r.start <= end

    elif middle > end:
        step = first_focusable_above

        def edge_in_view(r: RenderedItem) -> bool:
            return start <= r.end <= end

    else:
        return None

    for _ in range(len(store)):
        index = step(store, index)
        if index == ITEM_NOT_FOUND:
            return None
        item = store.get(index)
        if item is None:
            continue
        candidate = cache.get(item.id())
        if candidate is None:
            continue
        if candidate.start <= start and candidate.end >= end:
            return item.id()
        if edge_in_view(candidate):
            return item.id()
    return None
