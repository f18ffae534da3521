"""Growable ring container backing buffers, pending-operation queues and the dispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cspkit.errors import InvalidCapacity

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ['RingBuffer', 'ring']


class RingBuffer[T]:
    """Fixed-capacity circular list that can double itself on demand.

    Items are pushed at `head` (`unshift`) and popped from `tail` (`pop`), so
    the ring is FIFO. `head` and `tail` are always indexes into the current
    backing list; `length` counts the live items.

    Attributes:
        head: Index of the next free slot.
        tail: Index of the oldest item.
        length: Number of items held.
    """

    __slots__ = ('_arr', 'head', 'length', 'tail')

    def __init__(self, head: int, tail: int, length: int, arr: list[T | None]) -> None:
        self.head = head
        self.tail = tail
        self.length = length
        self._arr = arr

    @property
    def capacity(self) -> int:
        """Current size of the backing list."""
        return len(self._arr)

    def __len__(self) -> int:
        return self.length

    def pop(self) -> T | None:
        """Remove and return the oldest item, or None when empty."""
        if self.length == 0:
            return None
        elem = self._arr[self.tail]
        self._arr[self.tail] = None
        self.tail = (self.tail + 1) % len(self._arr)
        self.length -= 1
        return elem

    def unshift(self, item: T) -> None:
        """Push an item at the head without growing.

        Callers must not exceed the capacity; `unbounded_unshift` grows first.
        """
        self._arr[self.head] = item
        self.head = (self.head + 1) % len(self._arr)
        self.length += 1

    def unbounded_unshift(self, item: T) -> None:
        """Push an item at the head, doubling the capacity when nearly full."""
        if self.length + 1 == len(self._arr):
            self.resize()
        self.unshift(item)

    def resize(self) -> None:
        """Double the capacity and re-linearize contents starting at index 0."""
        size = len(self._arr)
        new_arr: list[T | None] = [None] * (size * 2)

        if self.length and self.tail < self.head:
            new_arr[0 : self.length] = self._arr[self.tail : self.head]
        elif self.length:
            # Contents wrap around the end (or fill the ring exactly).
            wrapped = size - self.tail
            new_arr[0:wrapped] = self._arr[self.tail :]
            new_arr[wrapped : self.length] = self._arr[: self.head]

        self.tail = 0
        self.head = self.length
        self._arr = new_arr

    def cleanup(self, keep: Callable[[T], bool]) -> None:
        """Drop every item for which `keep` is false, preserving order."""
        for _ in range(self.length):
            item: T = self.pop()  # type: ignore[assignment]
            if keep(item):
                self.unshift(item)

    def __repr__(self) -> str:
        return f'RingBuffer(length={self.length}, capacity={len(self._arr)})'


def ring[T](n: int) -> RingBuffer[T]:
    """Create an empty ring of capacity `n`.

    Raises:
        InvalidCapacityError: If `n` is not positive.
    """
    if n <= 0:
        raise InvalidCapacity(n).to_exception()
    return RingBuffer(0, 0, 0, [None] * n)
