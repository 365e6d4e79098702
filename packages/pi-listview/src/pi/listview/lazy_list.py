"""LazyList: a virtualized, scrollable list of items.

Items are rendered lazily into a flattened buffer; only the lines inside the
viewport are sliced out on ``view()``.  The list keeps one item "selected"
for keyboard navigation and, independently, an optional mouse text
selection over the visible lines.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pi.listview.commands import Cmd, batch, sequence
from pi.listview.config import ListOptions, parse_direction
from pi.listview.item import Focusable, Item, is_animatable
from pi.listview.keybindings import ListKeybindingsManager, get_list_keybindings
from pi.listview.layout import Direction, clamp_offset, view_position
from pi.listview.messages import (
    AnimStepMsg,
    ContinueRenderMsg,
    KeyPressMsg,
    MouseClickMsg,
    MouseMotionMsg,
    MouseReleaseMsg,
    MouseWheelMsg,
)
from pi.listview.navigation import (
    ITEM_NOT_FOUND,
    first_focusable_above,
    first_focusable_below,
    reselect_on_scroll,
    scroll_offset_for,
)
from pi.listview.render import Renderer
from pi.listview.selection import (
    SelectionRect,
    find_paragraph_boundaries,
    find_word_boundaries,
    plain_lines,
    selection_view,
)
from pi.listview.store import ItemStore
from pi.listview.utils import truncate_to_width

logger = logging.getLogger(__name__)

# Lines scrolled per line-scroll key press or mouse wheel notch
VIEWPORT_SCROLL_SIZE = 5


class LazyList:
    """Virtualized list widget driven by host messages.

    Mutators return an optional follow-up command for the host to run; the
    messages those commands produce must be fed back through ``update``.
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        options: ListOptions | None = None,
    ) -> None:
        opts = options or ListOptions()
        self._width = opts.width
        self._height = opts.height
        self._direction = parse_direction(opts.direction)
        self._wrap = opts.wrap_navigation
        self._focused = opts.focused
        self._resize_by_list = opts.resize_by_list
        self._enable_mouse = opts.enable_mouse
        self._keybindings = opts.keybindings
        self._theme = opts.theme

        self._store = ItemStore(items)
        self._renderer = Renderer(self._store, opts.gap)
        self._offset = 0

        self._selected_id = opts.selected_item
        self._prev_selected_id = ""
        # Set by explicit navigation; selects the strict scroll-into-view check
        self._moving_by_item = False

        self._selection = SelectionRect()

        self._cached_view: str | None = None
        self._cached_offset = 0
        self._view_dirty = True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> Cmd | None:
        return self._render()

    def update(self, msg: object) -> Cmd | None:
        """Handle one host message and return a follow-up command."""
        if isinstance(msg, ContinueRenderMsg):
            return self._continue_render(msg)
        if isinstance(msg, MouseWheelMsg):
            if not self._enable_mouse:
                return None
            if msg.button == "down":
                return self.move_down(VIEWPORT_SCROLL_SIZE)
            return self.move_up(VIEWPORT_SCROLL_SIZE)
        if isinstance(msg, (MouseClickMsg, MouseMotionMsg, MouseReleaseMsg)):
            if self._enable_mouse:
                self._handle_mouse(msg)
            return None
        if isinstance(msg, AnimStepMsg):
            return self._handle_anim_step(msg)
        if isinstance(msg, KeyPressMsg) and self._focused:
            return self._handle_key(msg)
        return None

    def view(self) -> str:
        """Visible lines as styled text, padded to the viewport box."""
        if self._width <= 0 or self._height <= 0 or not len(self._store):
            return ""

        has_selection = self.has_selection()
        if (
            not has_selection
            and not self._view_dirty
            and self._cached_view is not None
            and self._cached_offset == self._offset
        ):
            return self._cached_view

        view = self._base_view()
        if self._resize_by_list:
            return view

        if not has_selection:
            self._cached_view = view
            self._cached_offset = self._offset
            self._view_dirty = False
            return view

        return selection_view(
            view, self._width, self._height, self._selection, self._theme
        )

    def _base_view(self) -> str:
        start, end = self._view_position()
        text = self._renderer.buffer.get_lines(start, end) if end >= start else ""
        if self._resize_by_list:
            return text

        lines = text.split("\n") if end >= start else []
        fitted = [truncate_to_width(line, self._width, "", pad=True) for line in lines]
        blank = " " * self._width
        fitted.extend(blank for _ in range(self._height - len(fitted)))
        return "\n".join(fitted)

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def _handle_key(self, msg: KeyPressMsg) -> Cmd | None:
        bindings: ListKeybindingsManager = self._keybindings or get_list_keybindings()
        action = bindings.action_for(msg.key)

        if action == "down":
            return self.move_down(VIEWPORT_SCROLL_SIZE)
        if action == "up":
            return self.move_up(VIEWPORT_SCROLL_SIZE)
        if action == "downOneItem":
            return self.select_item_below()
        if action == "upOneItem":
            return self.select_item_above()
        if action == "halfPageDown":
            return self.move_down(self._height // 2)
        if action == "halfPageUp":
            return self.move_up(self._height // 2)
        if action == "pageDown":
            return self.move_down(self._height)
        if action == "pageUp":
            return self.move_up(self._height)
        if action == "end":
            return self.go_to_bottom()
        if action == "home":
            return self.go_to_top()

        # Anything else belongs to the selected item
        item = self.selected_item()
        if item is None:
            return None
        updated, cmd = item.update(msg)
        return batch(cmd, self.update_item(item.id(), updated))

    def _handle_mouse(
        self, msg: MouseClickMsg | MouseMotionMsg | MouseReleaseMsg
    ) -> None:
        if isinstance(msg, MouseClickMsg):
            if msg.clicks == 2:
                self.select_word(msg.col, msg.line)
            elif msg.clicks >= 3:
                self.select_paragraph(msg.col, msg.line)
            else:
                self.start_selection(msg.col, msg.line)
        elif isinstance(msg, MouseMotionMsg):
            self.end_selection(msg.col, msg.line)
        else:
            self.selection_stop()

    def _handle_anim_step(self, msg: AnimStepMsg) -> Cmd | None:
        if not len(self._store):
            return None
        spinning = [
            item
            for item in self._store
            if is_animatable(item) and item.spinning()
        ]
        if not spinning:
            return None

        cmds: list[Cmd | None] = []
        for item in spinning:
            updated, cmd = item.update(msg)
            cmds.append(cmd)
            cmds.append(self.update_item(item.id(), updated))
        return batch(*cmds)

    def _continue_render(self, msg: ContinueRenderMsg) -> Cmd | None:
        renderer = self._renderer
        if msg.generation != renderer.generation or renderer.is_complete:
            logger.debug("dropping stale continuation render (generation %d)", msg.generation)
            return None
        renderer.continue_render(msg.finish_index, self._direction)
        self._after_full_render()
        return None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, select_default: bool = True) -> Cmd | None:
        if self._width <= 0 or self._height <= 0 or not len(self._store):
            return None
        if select_default:
            self._set_default_selected()

        if self._focused:
            focus_cmd = self._focus_selected()
        else:
            focus_cmd = self._blur_selected()
        self._view_dirty = True

        renderer = self._renderer
        if not renderer.is_empty:
            renderer.rebuild()
            self._set_offset(self._offset)
            if self._focused:
                self._scroll_to_selection()
            return focus_cmd

        finish = renderer.first_pass(self._direction, self._height)
        if renderer.is_complete:
            self._after_full_render()
            return focus_cmd

        generation = renderer.generation

        def continue_render() -> ContinueRenderMsg:
            return ContinueRenderMsg(generation, finish)

        return batch(focus_cmd, continue_render)

    def _after_full_render(self) -> None:
        self._offset = 0
        self._view_dirty = True
        if self._focused:
            self._scroll_to_selection()

    def _view_position(self) -> tuple[int, int]:
        return view_position(
            self._offset, self._height, self._direction, self._renderer.total_height
        )

    def _set_offset(self, offset: int) -> None:
        self._offset = clamp_offset(offset, self._renderer.total_height, self._height)
        self._view_dirty = True

    # ------------------------------------------------------------------
    # Selected item and focus
    # ------------------------------------------------------------------

    def _set_default_selected(self) -> None:
        if self._selected_id:
            return
        if self._direction is Direction.FORWARD:
            index = first_focusable_below(self._store, -1)
        else:
            index = first_focusable_above(self._store, len(self._store))
        item = self._store.get(index) if index != ITEM_NOT_FOUND else None
        if item is not None:
            self._selected_id = item.id()

    def _focus_selected(self) -> Cmd | None:
        if not self._selected_id or not self._focused:
            return None

        cmds: list[Cmd | None] = []
        prev_id = self._prev_selected_id
        if prev_id and prev_id != self._selected_id:
            prev = self._store.get_by_id(prev_id)
            if isinstance(prev, Focusable) and prev.is_focused():
                cmds.append(prev.blur())
                self._renderer.invalidate(prev_id)

        item = self._store.get_by_id(self._selected_id)
        if isinstance(item, Focusable) and not item.is_focused():
            cmds.append(item.focus())
            self._renderer.invalidate(self._selected_id)

        self._prev_selected_id = self._selected_id
        return batch(*cmds)

    def _blur_selected(self) -> Cmd | None:
        if not self._selected_id or self._focused:
            return None
        item = self._store.get_by_id(self._selected_id)
        if isinstance(item, Focusable) and item.is_focused():
            self._renderer.invalidate(self._selected_id)
            return item.blur()
        return None

    def _scroll_to_selection(self) -> None:
        if not self._selected_id:
            return
        rendered = self._renderer.cache.get(self._selected_id)
        if rendered is None:
            self._selected_id = ""
            self._set_default_selected()
            self._moving_by_item = False
            return

        offset = scroll_offset_for(
            rendered,
            self._view_position(),
            self._height,
            self._renderer.total_height,
            self._direction,
            strict=self._moving_by_item,
        )
        self._moving_by_item = False
        if offset is not None:
            self._set_offset(offset)

    def _change_selection_when_scrolling(self) -> Cmd | None:
        if not self._selected_id:
            return None
        new_id = reselect_on_scroll(
            self._store,
            self._renderer.cache,
            self._selected_id,
            self._view_position(),
        )
        if new_id is None:
            return None
        logger.debug("selection follows scroll: %s -> %s", self._selected_id, new_id)
        self._selected_id = new_id
        return self._render()

    # ------------------------------------------------------------------
    # Item operations
    # ------------------------------------------------------------------

    def items(self) -> list[Item]:
        return self._store.items()

    def selected_item(self) -> Item | None:
        if not self._selected_id:
            return None
        return self._store.get_by_id(self._selected_id)

    def append_item(self, item: Item) -> Cmd | None:
        cmds: list[Cmd | None] = [item.init()]
        index = self._store.append(item)
        self._renderer.mark_dirty(index)

        if self._width > 0 and self._height > 0:
            cmds.append(item.set_size(self._width, self._height))
        cmds.append(self._render())

        if self._direction is Direction.BACKWARD:
            if self._offset == 0:
                cmds.append(self.go_to_bottom())
            else:
                rendered = self._renderer.cache.get(item.id())
                if rendered is not None:
                    new_lines = rendered.height
                    if len(self._store) > 1:
                        new_lines += self._renderer.gap
                    self._set_offset(self._offset + new_lines)
        return sequence(*cmds)

    def prepend_item(self, item: Item) -> Cmd | None:
        cmds: list[Cmd | None] = [item.init()]
        self._store.prepend(item)
        self._renderer.mark_dirty(0)

        if self._width > 0 and self._height > 0:
            cmds.append(item.set_size(self._width, self._height))
        cmds.append(self._render())

        if self._direction is Direction.FORWARD:
            if self._offset == 0:
                cmds.append(self.go_to_top())
            else:
                rendered = self._renderer.cache.get(item.id())
                if rendered is not None:
                    new_lines = rendered.height
                    if len(self._store) > 1:
                        new_lines += self._renderer.gap
                    self._set_offset(self._offset + new_lines)
        return batch(*cmds)

    def update_item(self, item_id: str, item: Item) -> Cmd | None:
        """Replace the item stored under *item_id* with *item*."""
        index = self._store.index_of(item_id)
        if index is None:
            return None

        self._store.set(index, item)
        old = self._renderer.cache.get(item_id)
        old_position = self._offset
        if self._direction is Direction.BACKWARD:
            old_position = (self._renderer.total_height - 1) - self._offset

        self._renderer.invalidate(item_id, index)
        if item.id() != item_id:
            self._renderer.cache.delete(item.id())
            if self._selected_id == item_id:
                self._selected_id = item.id()

        cmd = self._render()

        new = self._renderer.cache.get(item.id())
        if old is not None and new is not None:
            delta = new.height - old.height
            if self._direction is Direction.BACKWARD:
                # Growth below the visible bottom edge must not move the view
                if old_position < old.end:
                    self._set_offset(self._offset + delta)
            elif self._offset > old.start:
                self._set_offset(self._offset + delta)
        return cmd

    def delete_item(self, item_id: str) -> Cmd | None:
        index = self._store.delete(item_id)
        if index is None:
            return None
        self._renderer.cache.delete(item_id)
        self._renderer.mark_dirty(index)

        if self._selected_id == item_id:
            prev = self._store.get(index - 1) if index > 0 else None
            self._selected_id = prev.id() if prev is not None else ""

        if not len(self._store):
            self._renderer.reset()
            self._offset = 0
            self._view_dirty = True
            return None

        cmd = self._render(select_default=False)
        self._set_offset(self._offset)
        return cmd

    def set_items(self, items: Iterable[Item]) -> Cmd | None:
        self._store.replace(items)
        cmds: list[Cmd | None] = [item.init() for item in self._store]
        cmds.append(self._reset(""))
        return batch(*cmds)

    def _reset(self, selected_id: str) -> Cmd | None:
        self._renderer.reset()
        self._offset = 0
        self._selected_id = selected_id
        self._view_dirty = True

        cmds: list[Cmd | None] = []
        if self._width > 0 and self._height > 0:
            cmds.extend(item.set_size(self._width, self._height) for item in self._store)
        cmds.append(self._render())
        return batch(*cmds)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def set_size(self, width: int, height: int) -> Cmd | None:
        """Resize the viewport.

        A width change re-lays out every item; a height change only clamps
        the scroll offset.
        """
        old_width = self._width
        self._width = width
        self._height = height
        self._view_dirty = True
        if old_width != width:
            return self._reset(self._selected_id)
        if self._renderer.is_empty:
            return self._render()
        self._set_offset(self._offset)
        return None

    def get_size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def rendered(self) -> str:
        """The full rendered buffer, every item laid out top to bottom."""
        return self._renderer.buffer.text

    @property
    def rendered_height(self) -> int:
        return self._renderer.total_height

    def set_direction(self, direction: Direction | str) -> Cmd | None:
        """Switch the scroll anchor; the view snaps to the new anchored edge."""
        direction = parse_direction(direction)
        if direction is self._direction:
            return None
        self._direction = direction
        self._offset = 0
        self._view_dirty = True
        return self._render()

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------

    def move_down(self, n: int) -> Cmd | None:
        """Scroll the content *n* lines towards the end of the list."""
        old = self._offset
        if self._direction is Direction.FORWARD:
            self._set_offset(self._offset + max(0, n))
        else:
            self._set_offset(self._offset - max(0, n))

        delta = abs(self._offset - old)
        if delta == 0:
            return None
        self._shift_selection(-delta)
        return self._change_selection_when_scrolling()

    def move_up(self, n: int) -> Cmd | None:
        """Scroll the content *n* lines towards the start of the list."""
        old = self._offset
        if self._direction is Direction.FORWARD:
            self._set_offset(self._offset - max(0, n))
        else:
            self._set_offset(self._offset + max(0, n))

        delta = abs(self._offset - old)
        if delta == 0:
            return None
        self._shift_selection(delta)
        return self._change_selection_when_scrolling()

    def _shift_selection(self, delta: int) -> None:
        if self._selection.active or not self._selection.is_empty():
            self._selection.shift_lines(delta)

    def go_to_top(self) -> Cmd | None:
        self._offset = 0
        self._selected_id = ""
        self._direction = Direction.FORWARD
        self._view_dirty = True
        return self._render()

    def go_to_bottom(self) -> Cmd | None:
        self._offset = 0
        self._selected_id = ""
        self._direction = Direction.BACKWARD
        self._view_dirty = True
        return self._render()

    # ------------------------------------------------------------------
    # Navigation and focus
    # ------------------------------------------------------------------

    def _selected_index(self) -> int | None:
        """Index of the selected item, resetting a stale selection to the default."""
        index = self._store.index_of(self._selected_id) if self._selected_id else None
        if index is None:
            self._selected_id = ""
            self._set_default_selected()
        return index

    def select_item_above(self) -> Cmd | None:
        index = self._selected_index()
        if index is None:
            return self._render()

        new_index = first_focusable_above(self._store, index, self._wrap)
        if new_index == ITEM_NOT_FOUND:
            return None

        cmds: list[Cmd | None] = []
        if new_index > 0 and first_focusable_above(self._store, new_index) == ITEM_NOT_FOUND:
            # Only static items above: show them too
            cmds.append(self.go_to_top())

        item = self._store.get(new_index)
        if item is None:
            return None
        self._prev_selected_id = self._selected_id
        self._selected_id = item.id()
        self._moving_by_item = True
        cmds.append(self._render())
        return sequence(*cmds)

    def select_item_below(self) -> Cmd | None:
        index = self._selected_index()
        if index is None:
            return self._render()

        new_index = first_focusable_below(self._store, index, self._wrap)
        if new_index == ITEM_NOT_FOUND:
            return None
        item = self._store.get(new_index)
        if item is None:
            return None
        self._prev_selected_id = self._selected_id
        self._selected_id = item.id()
        self._moving_by_item = True
        return self._render()

    def set_selected(self, item_id: str) -> Cmd | None:
        if item_id and item_id not in self._store:
            return None
        self._prev_selected_id = self._selected_id
        self._selected_id = item_id
        self._moving_by_item = True
        return self._render()

    def focus(self) -> Cmd | None:
        self._focused = True
        return self._render()

    def blur(self) -> Cmd | None:
        self._focused = False
        return self._render()

    def is_focused(self) -> bool:
        return self._focused

    # ------------------------------------------------------------------
    # Mouse selection
    # ------------------------------------------------------------------

    def start_selection(self, col: int, line: int) -> None:
        self._selection.start(col, line)

    def end_selection(self, col: int, line: int) -> None:
        self._selection.extend(col, line)

    def selection_stop(self) -> None:
        self._selection.stop()

    def selection_clear(self) -> None:
        self._selection.clear()

    def has_selection(self) -> bool:
        return not self._selection.is_empty()

    def select_word(self, col: int, line: int) -> None:
        """Select the word under screen position (*col*, *line*).

        Landing on whitespace (or outside the content) leaves an empty
        selection.
        """
        start, end = self._view_position()
        buffer_line = start + line
        bounds = None
        if end >= start and 0 <= line and buffer_line <= end:
            text = self._renderer.buffer.get_lines(buffer_line, buffer_line)
            bounds = find_word_boundaries(text, col)
        if bounds is None:
            self._selection.clear()
            return
        self._selection.set(bounds[0], line, bounds[1], line)

    def select_paragraph(self, col: int, line: int) -> None:
        """Select every line of the paragraph under screen *line*."""
        start, end = self._view_position()
        if end < start:
            return
        lines = plain_lines(self._renderer.buffer.lines(), self._theme)
        found = find_paragraph_boundaries(lines, start + line)
        if found is None:
            return
        first, last = found
        self._selection.set(0, first - start, self._width - 1, last - start)

    def get_selected_text(self) -> str:
        if not self.has_selection():
            return ""
        return selection_view(
            self._base_view(),
            self._width,
            self._height,
            self._selection,
            self._theme,
            text_only=True,
        )
