"""Incremental renderer: per-item render cache and rendered buffer upkeep.

The buffer is every item's view joined by ``gap + 1`` newlines, top to bottom
in item order, whatever the scroll direction.  It is built in three ways:

* a lazy first pass that renders items in direction order until the viewport
  is full, leaving the rest to a deferred continuation;
* the continuation, which renders the remaining items and appends (forward)
  or prepends (backward) them without touching the visible part;
* an incremental rebuild that keeps every line above the first invalidated
  item and regenerates only the tail from there.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pi.listview.item import Item
from pi.listview.layout import Direction, RenderedBuffer
from pi.listview.store import ItemStore
from pi.listview.utils import line_height

logger = logging.getLogger(__name__)


@dataclass
class RenderedItem:
    """Cached render of one item and its line span in the buffer."""

    view: str
    height: int
    start: int = 0
    end: int = 0


class RenderCache:
    """Rendered items keyed by item identifier."""

    def __init__(self) -> None:
        self._entries: dict[str, RenderedItem] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entries

    def get(self, item_id: str) -> RenderedItem | None:
        return self._entries.get(item_id)

    def set(self, item_id: str, rendered: RenderedItem) -> None:
        self._entries[item_id] = rendered

    def delete(self, item_id: str) -> None:
        self._entries.pop(item_id, None)

    def clear(self) -> None:
        self._entries.clear()


def render_item(item: Item) -> RenderedItem:
    view = item.view()
    return RenderedItem(view=view, height=line_height(view))


class Renderer:
    """Owns the render cache and the rendered buffer for one item store."""

    def __init__(self, store: ItemStore, gap: int = 0) -> None:
        self.store = store
        self.gap = max(0, gap)
        self.cache = RenderCache()
        self.buffer = RenderedBuffer()
        # Stop index of a first pass whose continuation has not run yet
        self.pending_from: int | None = None
        self.generation = 0
        self._dirty_from: int | None = None

    @property
    def separator(self) -> str:
        return "\n" * (self.gap + 1)

    @property
    def is_empty(self) -> bool:
        return not self.buffer.text

    @property
    def is_complete(self) -> bool:
        return self.pending_from is None

    @property
    def dirty_from(self) -> int | None:
        return self._dirty_from

    def mark_dirty(self, index: int) -> None:
        if self._dirty_from is None or index < self._dirty_from:
            self._dirty_from = index

    def invalidate(self, item_id: str, index: int | None = None) -> None:
        """Drop the cached render of *item_id*; lines from *index* on are stale."""
        self.cache.delete(item_id)
        if index is None:
            index = self.store.index_of(item_id)
        if index is not None:
            self.mark_dirty(index)

    def reset(self) -> None:
        self.cache.clear()
        self.buffer.clear()
        self.pending_from = None
        self._dirty_from = None
        self.generation += 1

    # -- Lazy first pass + continuation ---------------------------------------

    def first_pass(self, direction: Direction, viewport_height: int) -> int:
        """Render just enough items to fill the viewport.

        Returns the index (in direction order) at which rendering stopped;
        equal to the item count when everything was rendered.
        """
        text, finish = self._render_iterator(0, viewport_height, direction, 0)
        self.buffer.set(text)
        if direction is Direction.BACKWARD:
            self.recalculate_positions(0)
        self._dirty_from = None
        self.generation += 1
        self.pending_from = finish if finish < len(self.store) else None
        logger.debug(
            "first pass stopped at %d of %d items", finish, len(self.store)
        )
        return finish

    def continue_render(self, finish_index: int, direction: Direction) -> None:
        """Render the items a first pass left out, keeping visible lines intact."""
        current = self.buffer.height - 1 if self.buffer.height else 0
        text, _ = self._render_iterator(finish_index, None, direction, current)
        if direction is Direction.FORWARD:
            self.buffer.extend(text)
        else:
            self.buffer.set(text + self.buffer.text)
            self.recalculate_positions(0)
        self.pending_from = None
        logger.debug("continuation rendered items from %d", finish_index)

    def _render_iterator(
        self,
        start_index: int,
        limit_height: int | None,
        direction: Direction,
        current_height: int,
    ) -> tuple[str, int]:
        items_len = len(self.store)
        fragments: list[str] = []
        finish_index = items_len

        for i in range(start_index, items_len):
            if limit_height is not None and current_height >= limit_height:
                finish_index = i
                break
            inx = i if direction is Direction.FORWARD else items_len - 1 - i
            item = self.store.get(inx)
            if item is None:
                continue

            rendered = self.cache.get(item.id())
            if rendered is None:
                rendered = render_item(item)
                self.cache.set(item.id(), rendered)
            rendered.start = current_height
            rendered.end = current_height + rendered.height - 1

            sep = "" if inx == items_len - 1 else self.separator
            fragments.append(rendered.view + sep)
            current_height = rendered.end + 1 + self.gap

        if direction is Direction.BACKWARD:
            fragments.reverse()
        return "".join(fragments), finish_index

    # -- Incremental rebuild --------------------------------------------------

    def rebuild(self) -> bool:
        """Bring the buffer up to date after invalidations.

        Returns ``True`` if anything was rebuilt.  An incomplete buffer is
        completed with a full rebuild.
        """
        if self.pending_from is not None:
            self.pending_from = None
            self.rebuild_from(0)
            return True
        if self._dirty_from is None:
            return False
        self.rebuild_from(self._dirty_from)
        return True

    def rebuild_from(self, index: int) -> None:
        """Re-layout items from *index* on and splice them into the buffer."""
        prev = None
        if index > 0:
            prev_item = self.store.get(index - 1)
            prev = self.cache.get(prev_item.id()) if prev_item is not None else None
            if prev is None:
                index = 0

        current = prev.end + 1 + self.gap if prev is not None else 0
        views: list[str] = []
        for i in range(index, len(self.store)):
            item = self.store.get(i)
            if item is None:
                continue
            rendered = self.cache.get(item.id())
            if rendered is None:
                rendered = render_item(item)
                self.cache.set(item.id(), rendered)
            rendered.start = current
            rendered.end = current + rendered.height - 1
            current = rendered.end + 1 + self.gap
            views.append(rendered.view)

        tail = self.separator.join(views)
        if prev is None:
            self.buffer.set(tail)
        else:
            self.buffer.splice(prev.end + 1, self.separator + tail if views else "")
        self._dirty_from = None
        logger.debug("rebuilt rendered buffer from item %d", index)

    def recalculate_positions(self, start_index: int) -> None:
        """Recompute ``start``/``end`` of cached items from *start_index* on."""
        current = 0
        if start_index > 0:
            prev_item = self.store.get(start_index - 1)
            prev = self.cache.get(prev_item.id()) if prev_item is not None else None
            if prev is not None:
                current = prev.end + 1 + self.gap

        for i in range(start_index, len(self.store)):
            item = self.store.get(i)
            if item is None:
                continue
            rendered = self.cache.get(item.id())
            if rendered is None:
                continue
            rendered.start = current
            rendered.end = current + rendered.height - 1
            current = rendered.end + 1 + self.gap

    @property
    def total_height(self) -> int:
        return self.buffer.height
