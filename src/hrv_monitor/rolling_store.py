"""Fixed-capacity, oldest-evicting history buffers."""

from __future__ import annotations

from collections import deque
from threading import Lock
from typing import Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


class RollingStore(Generic[T]):
    """Insertion-ordered buffer that never holds more than ``capacity`` items.

    Appending to a full store evicts the oldest item first. The store does
    not sort; callers append in chronological order.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._items: deque[T] = deque(maxlen=capacity)
        self._lock = Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, item: T) -> None:
        """Add ``item`` as the newest entry, evicting the oldest when full."""

        with self._lock:
            self._items.append(item)

    def replace_all(self, items: Iterable[T]) -> None:
        """Swap the whole contents for ``items``.

        Only the most recent ``capacity`` entries of ``items`` are kept, in
        the order given.
        """

        replacement: deque[T] = deque(items, maxlen=self._capacity)
        with self._lock:
            self._items = replacement

    def snapshot(self) -> tuple[T, ...]:
        """Return an immutable copy of the current contents, oldest first."""

        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"<RollingStore(size={len(self)}, capacity={self._capacity})>"
