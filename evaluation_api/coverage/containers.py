"""
Ordered collections used by the coverage engine.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator, MutableSet
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class OrderedSet(MutableSet):
    """
    Set that remembers insertion order.

    Backed by a dict so membership is O(1) and iteration follows the order in
    which items were first added.
    """

    def __init__(self, items: Optional[Iterable[Hashable]] = None) -> None:
        self._items: dict[Hashable, None] = {}
        if items is not None:
            self.update(items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"OrderedSet({list(self._items)!r})"

    def add(self, item: Hashable) -> None:
        self._items[item] = None

    def discard(self, item: Hashable) -> None:
        self._items.pop(item, None)

    def update(self, items: Iterable[Hashable]) -> None:
        for item in items:
            self.add(item)

    def copy(self) -> OrderedSet:
        return OrderedSet(self)

    def to_list(self) -> list[Any]:
        return list(self._items)


class KeyedCollection(Generic[T]):
    """
    Insertion-ordered map from a computed identity key to a record.

    ``key_fn`` derives the identity key of a record; ``merge_fn`` folds a
    newcomer into the record already stored under the same key. The first
    record seen for a key stays in place, so callers control precedence by
    the order in which they add.
    """

    def __init__(
        self,
        key_fn: Callable[[T], Hashable],
        merge_fn: Callable[[T, T], None],
        records: Optional[Iterable[T]] = None,
    ) -> None:
        self._key_fn = key_fn
        self._merge_fn = merge_fn
        self._records: dict[Hashable, T] = {}
        if records is not None:
            for record in records:
                self.add(record)

    def add(self, record: T) -> T:
        """Insert ``record`` or merge it into the existing entry; returns the stored record."""
        key = self._key_fn(record)
        current = self._records.get(key)
        if current is None:
            self._records[key] = record
            return record
        self._merge_fn(current, record)
        return current

    def get(self, key: Hashable) -> Optional[T]:
        return self._records.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[T]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def keys(self) -> list[Hashable]:
        return list(self._records)

    def values(self) -> list[T]:
        return list(self._records.values())
