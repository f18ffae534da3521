"""Buffer policies: fixed, dropping, sliding and promise."""

from __future__ import annotations

from typing import Any

from cspkit.channels.markers import NO_VALUE
from cspkit.channels.ring import RingBuffer, ring

__all__ = [
    'DroppingBuffer',
    'FixedBuffer',
    'PromiseBuffer',
    'SlidingBuffer',
    'dropping',
    'fixed',
    'promise',
    'sliding',
]


class _RingBacked[T]:
    """Shared storage for the ring-based policies."""

    __slots__ = ('buffer', 'n')

    def __init__(self, buffer: RingBuffer[T], n: int) -> None:
        self.buffer = buffer
        self.n = n

    def remove(self) -> T | None:
        return self.buffer.pop()

    def count(self) -> int:
        return self.buffer.length

    def close_buffer(self) -> None:
        pass

    def __len__(self) -> int:
        return self.buffer.length

    def __repr__(self) -> str:
        return f'{type(self).__name__}(n={self.n}, count={self.buffer.length})'


class FixedBuffer[T](_RingBacked[T]):
    """Bounded FIFO: reports full at `n` items and the channel stops admitting puts.

    `add` itself never refuses; values are only ever added past `n` by a
    transform that expands one input into several outputs.
    """

    __slots__ = ()

    def is_full(self) -> bool:
        return self.buffer.length == self.n

    def add(self, item: T) -> None:
        self.buffer.unbounded_unshift(item)


class DroppingBuffer[T](_RingBacked[T]):
    """Never full; once `n` items are held new items are discarded."""

    __slots__ = ()

    def is_full(self) -> bool:
        return False

    def add(self, item: T) -> None:
        if self.buffer.length != self.n:
            self.buffer.unshift(item)


class SlidingBuffer[T](_RingBacked[T]):
    """Never full; once `n` items are held the oldest is evicted for each new one."""

    __slots__ = ()

    def is_full(self) -> bool:
        return False

    def add(self, item: T) -> None:
        if self.buffer.length == self.n:
            self.buffer.pop()
        self.buffer.unshift(item)


class PromiseBuffer[T]:
    """Holds at most one value, delivered to every take forever.

    The first `add` wins; later adds are ignored. Closing before any value
    arrives leaves the buffer permanently empty, so takes see CLOSED.
    """

    __slots__ = ('_closed_empty', 'value')

    def __init__(self) -> None:
        self.value: Any = NO_VALUE
        self._closed_empty = False

    @property
    def delivered(self) -> bool:
        """Whether a value has been admitted."""
        return self.value is not NO_VALUE

    def is_full(self) -> bool:
        return False

    def add(self, item: T) -> None:
        if not self.delivered and not self._closed_empty:
            self.value = item

    def remove(self) -> T | None:
        if not self.delivered:
            return None
        return self.value

    def count(self) -> int:
        return 1 if self.delivered else 0

    def close_buffer(self) -> None:
        if not self.delivered:
            self._closed_empty = True

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f'PromiseBuffer(value={self.value!r})'


def fixed[T](n: int) -> FixedBuffer[T]:
    """Create a fixed buffer of size `n`.

    Example:
        ```python
        ch = chan(fixed(10))
        ```
    """
    return FixedBuffer(ring(n), n)


def dropping[T](n: int) -> DroppingBuffer[T]:
    """Create a dropping buffer that keeps the first `n` values."""
    return DroppingBuffer(ring(n), n)


def sliding[T](n: int) -> SlidingBuffer[T]:
    """Create a sliding buffer that keeps the last `n` values."""
    return SlidingBuffer(ring(n), n)


def promise[T]() -> PromiseBuffer[T]:
    """Create a promise buffer (single value, delivered to every taker)."""
    return PromiseBuffer()
