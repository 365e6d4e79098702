"""Ordered item storage with an identifier -> position index."""

from __future__ import annotations

from typing import Iterable, Iterator

from pi.listview.item import Indexable, Item


class ItemStore:
    """Items in display order plus an index map kept in step with them.

    The index map is rebuilt on structural changes at the front (prepend,
    bulk replace) and patched from the changed position onward for appends
    and deletions.  Items implementing ``Indexable`` are told their new
    position whenever it changes.
    """

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: list[Item] = list(items)
        self._index: dict[str, int] = {}
        self._reindex_from(0)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._index

    # -- Lookups --------------------------------------------------------------

    def get(self, index: int) -> Item | None:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def index_of(self, item_id: str) -> int | None:
        return self._index.get(item_id)

    def get_by_id(self, item_id: str) -> Item | None:
        index = self._index.get(item_id)
        return None if index is None else self._items[index]

    def items(self) -> list[Item]:
        return list(self._items)

    def index_map(self) -> dict[str, int]:
        return dict(self._index)

    # -- Mutation -------------------------------------------------------------

    def append(self, item: Item) -> int:
        index = len(self._items)
        self._items.append(item)
        self._reindex_from(index)
        return index

    def prepend(self, item: Item) -> None:
        self._items.insert(0, item)
        self._index = {}
        self._reindex_from(0)

    def set(self, index: int, item: Item) -> None:
        old = self._items[index]
        self._items[index] = item
        if old.id() != item.id():
            self._index.pop(old.id(), None)
        self._reindex_from(index, stop=index + 1)

    def delete(self, item_id: str) -> int | None:
        """Remove the item with *item_id* and return its former position."""
        index = self._index.pop(item_id, None)
        if index is None:
            return None
        del self._items[index]
        self._reindex_from(index)
        return index

    def replace(self, items: Iterable[Item]) -> None:
        self._items = list(items)
        self._index = {}
        self._reindex_from(0)

    def _reindex_from(self, start: int, stop: int | None = None) -> None:
        end = len(self._items) if stop is None else stop
        for i in range(start, end):
            item = self._items[i]
            self._index[item.id()] = i
            if isinstance(item, Indexable):
                item.set_index(i)
