"""Channel protocols: Buffer, Handler and Reducer capabilities.

The channel engine only ever talks to these three small interfaces, so any
object implementing them can be plugged in: a custom buffering policy, a
handler that bridges into another event system, or a reducer from an external
transform library.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol, runtime_checkable

__all__ = ['Buffer', 'Handler', 'Reducer']


@runtime_checkable
class Buffer[T](Protocol):
    """Buffering policy owned by a channel.

    Type Parameters:
        T: The type of buffered values.
    """

    @abstractmethod
    def is_full(self) -> bool:
        """Whether the channel must stop admitting puts into this buffer."""
        ...

    @abstractmethod
    def add(self, item: T) -> None:
        """Admit an item (the policy may drop it or evict another)."""
        ...

    @abstractmethod
    def remove(self) -> T | None:
        """Remove and return the next item, or None when empty."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of items a take could currently obtain."""
        ...

    @abstractmethod
    def close_buffer(self) -> None:
        """Called once when the owning channel closes."""
        ...


@runtime_checkable
class Handler(Protocol):
    """A pending take or put.

    `is_active()` must be checked before `commit()`, and `commit()` is called
    at most once. Committing is the single irreversible step that decides
    which of several racing operations wins.
    """

    @abstractmethod
    def is_active(self) -> bool:
        """Whether this operation may still complete."""
        ...

    @abstractmethod
    def is_blockable(self) -> bool:
        """Whether this operation may wait in a channel's pending queue."""
        ...

    @abstractmethod
    def commit(self) -> Any:
        """Claim the operation and return its continuation `fn(value)`."""
        ...


class Reducer(Protocol):
    """Step/result pair a channel runs values through on their way into its buffer.

    `step` returns the accumulator (the buffer) or a `Reduced` wrapper to
    request early termination; `result` runs once when the channel closes.
    """

    def step(self, acc: Any, item: Any) -> Any: ...

    def result(self, acc: Any) -> Any: ...
