"""FIFO buffer between fetching and transmission."""

from __future__ import annotations

from collections import deque
from typing import Any


class QueueEmptyError(IndexError):
    """Raised when popping from an empty queue."""


class EntryQueue:
    def __init__(self) -> None:
        self._items: deque[dict[str, Any]] = deque()

    def push(self, item: dict[str, Any]) -> None:
        self._items.append(item)

    def pop(self) -> dict[str, Any]:
        if not self._items:
            raise QueueEmptyError("pop from an empty entry queue")
        return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
