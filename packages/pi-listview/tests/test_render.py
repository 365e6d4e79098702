"""Tests for pi.listview.render — lazy first pass, continuation, incremental rebuild."""

from __future__ import annotations

from pi.listview.layout import Direction
from pi.listview.render import Renderer
from pi.listview.store import ItemStore

from .fakes import TextItem, text_items


def _full_text(store: ItemStore, gap: int = 0) -> str:
    return ("\n" * (gap + 1)).join(item.view() for item in store)


def _positions(renderer: Renderer) -> list[tuple[int, int]]:
    result = []
    for item in renderer.store:
        rendered = renderer.cache.get(item.id())
        assert rendered is not None
        result.append((rendered.start, rendered.end))
    return result


class TestFirstPass:
    """The first pass stops once the viewport is full."""

    def test_forward_stops_at_viewport(self):
        renderer = Renderer(ItemStore(text_items(5)))
        finish = renderer.first_pass(Direction.FORWARD, 3)
        assert finish == 3
        assert not renderer.is_complete
        assert renderer.buffer.get_lines(0, 2) == "item0\nitem1\nitem2"

    def test_forward_renders_everything_when_it_fits(self):
        renderer = Renderer(ItemStore(text_items(2)))
        assert renderer.first_pass(Direction.FORWARD, 3) == 2
        assert renderer.is_complete
        assert renderer.buffer.text == "item0\nitem1"

    def test_backward_renders_from_the_end(self):
        renderer = Renderer(ItemStore(text_items(5)))
        renderer.first_pass(Direction.BACKWARD, 3)
        assert renderer.buffer.text == "item2\nitem3\nitem4"
        assert renderer.cache.get("item2").start == 0
        assert renderer.cache.get("item4").start == 2
        assert "item0" not in renderer.cache

    def test_first_pass_bumps_generation(self):
        renderer = Renderer(ItemStore(text_items(5)))
        before = renderer.generation
        renderer.first_pass(Direction.FORWARD, 3)
        assert renderer.generation == before + 1

    def test_tall_item_fills_viewport_alone(self):
        store = ItemStore([TextItem("tall", "a\nb\nc\nd"), TextItem("x")])
        renderer = Renderer(store)
        assert renderer.first_pass(Direction.FORWARD, 3) == 1


class TestContinuation:
    """The continuation completes the buffer without moving existing lines."""

    def test_forward_appends(self):
        store = ItemStore(text_items(5))
        renderer = Renderer(store)
        finish = renderer.first_pass(Direction.FORWARD, 3)
        renderer.continue_render(finish, Direction.FORWARD)
        assert renderer.is_complete
        assert renderer.buffer.text == _full_text(store)
        assert _positions(renderer) == [(i, i) for i in range(5)]

    def test_backward_prepends(self):
        store = ItemStore(text_items(5))
        renderer = Renderer(store)
        finish = renderer.first_pass(Direction.BACKWARD, 3)
        renderer.continue_render(finish, Direction.BACKWARD)
        assert renderer.buffer.text == _full_text(store)
        assert _positions(renderer) == [(i, i) for i in range(5)]

    def test_gap_between_items(self):
        store = ItemStore(text_items(4))
        renderer = Renderer(store, gap=1)
        finish = renderer.first_pass(Direction.FORWARD, 3)
        renderer.continue_render(finish, Direction.FORWARD)
        assert renderer.buffer.text == "item0\n\nitem1\n\nitem2\n\nitem3"
        assert _positions(renderer) == [(0, 0), (2, 2), (4, 4), (6, 6)]

    def test_backward_with_gap_and_multiline_items(self):
        store = ItemStore(
            [TextItem("a", "a1\na2"), TextItem("b"), TextItem("c", "c1\nc2\nc3")]
        )
        renderer = Renderer(store, gap=1)
        finish = renderer.first_pass(Direction.BACKWARD, 2)
        renderer.continue_render(finish, Direction.BACKWARD)
        assert renderer.buffer.text == _full_text(store, gap=1)
        assert _positions(renderer) == [(0, 1), (3, 3), (5, 7)]


class TestIncrementalRebuild:
    """Invalidated items are re-rendered and only the tail is rebuilt."""

    def _complete(self, store: ItemStore, gap: int = 0) -> Renderer:
        renderer = Renderer(store, gap)
        finish = renderer.first_pass(Direction.FORWARD, 100)
        assert finish == len(store)
        return renderer

    def test_nothing_dirty(self):
        renderer = self._complete(ItemStore(text_items(3)))
        assert renderer.rebuild() is False

    def test_height_change_shifts_following_items(self):
        store = ItemStore(text_items(3))
        renderer = self._complete(store)
        store.get(1).text = "x\ny"
        renderer.invalidate("item1")
        assert renderer.dirty_from == 1
        assert renderer.rebuild() is True
        assert renderer.buffer.text == "item0\nx\ny\nitem2"
        assert renderer.cache.get("item2").start == 3
        assert renderer.dirty_from is None

    def test_earliest_invalidation_wins(self):
        store = ItemStore(text_items(4))
        renderer = self._complete(store, gap=1)
        store.get(3).text = "three"
        store.get(1).text = "one"
        renderer.invalidate("item3")
        renderer.invalidate("item1")
        renderer.rebuild()
        assert renderer.buffer.text == _full_text(store, gap=1)

    def test_append_then_delete_restores_buffer(self):
        store = ItemStore(text_items(3))
        renderer = self._complete(store, gap=2)
        before = renderer.buffer.text

        index = store.append(TextItem("new", "n1\nn2"))
        renderer.mark_dirty(index)
        renderer.rebuild()
        assert renderer.buffer.text == _full_text(store, gap=2)

        former = store.delete("new")
        renderer.cache.delete("new")
        renderer.mark_dirty(former)
        renderer.rebuild()
        assert renderer.buffer.text == before

    def test_delete_first_item(self):
        store = ItemStore(text_items(3))
        renderer = self._complete(store)
        store.delete("item0")
        renderer.cache.delete("item0")
        renderer.mark_dirty(0)
        renderer.rebuild()
        assert renderer.buffer.text == "item1\nitem2"
        assert _positions(renderer) == [(0, 0), (1, 1)]

    def test_pending_first_pass_forces_full_rebuild(self):
        store = ItemStore(text_items(6))
        renderer = Renderer(store)
        renderer.first_pass(Direction.FORWARD, 2)
        assert renderer.rebuild() is True
        assert renderer.is_complete
        assert renderer.buffer.text == _full_text(store)

    def test_reset(self):
        renderer = self._complete(ItemStore(text_items(2)))
        generation = renderer.generation
        renderer.reset()
        assert renderer.is_empty
        assert len(renderer.cache) == 0
        assert renderer.generation == generation + 1
