"""First-in first-out queue whose items are compared by identity."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Iterator


class QueueError(Exception):
    """Raised when a queue operation cannot be carried out."""


class _Node:
    __slots__ = ("data", "removed")

    def __init__(self, data: Any) -> None:
        self.data = data
        self.removed = False


class Queue:
    """FIFO queue. Enqueue, dequeue and length are O(1).

    Items are matched by identity, never by equality, and ``None`` cannot be
    stored.
    """

    def __init__(self) -> None:
        self._nodes: deque[_Node] = deque()
        self._destroyed = False

    def _check_alive(self) -> None:
        if self._destroyed:
            raise QueueError("queue has been destroyed")

    def enqueue(self, data: Any) -> None:
        """Append ``data`` at the back of the queue."""
        self._check_alive()
        if data is None:
            raise QueueError("cannot enqueue None")
        self._nodes.append(_Node(data))

    def dequeue(self) -> Any:
        """Remove and return the oldest item."""
        self._check_alive()
        if not self._nodes:
            raise QueueError("queue is empty")
        node = self._nodes.popleft()
        node.removed = True
        return node.data

    def delete(self, data: Any) -> bool:
        """Remove the oldest item that is ``data``; return whether one was found."""
        self._check_alive()
        if data is None:
            raise QueueError("cannot delete None")
        for index, node in enumerate(self._nodes):
            if node.data is data:
                del self._nodes[index]
                node.removed = True
                return True
        return False

    def iterate(self, func: Callable[["Queue", Any], None]) -> None:
        """Call ``func(queue, item)`` on each item, oldest first.

        Items removed by ``func`` during the walk are not visited afterwards.
        """
        self._check_alive()
        if func is None or not callable(func):
            raise QueueError("a callable is required")
        for node in list(self._nodes):
            if not node.removed:
                func(self, node.data)

    def destroy(self) -> None:
        """Retire the queue; it must be empty."""
        self._check_alive()
        if self._nodes:
            raise QueueError("cannot destroy a non-empty queue")
        self._destroyed = True

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Any]:
        self._check_alive()
        snapshot = [node.data for node in self._nodes]
        yield from snapshot