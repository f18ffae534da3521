"""Host protocol and implementations for the dispatcher.

A host is the event source the dispatcher borrows: it runs a callback "on the
next turn" and runs a callback after a delay. The engine never blocks or
sleeps on its own.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

__all__ = [
    'DispatchHost',
    'TimerHandle',
]


@runtime_checkable
class TimerHandle(Protocol):
    """Something that can cancel a pending delayed callback."""

    def cancel(self) -> None: ...


@runtime_checkable
class DispatchHost(Protocol):
    """Protocol for dispatcher hosts.

    Implementations:
        - AsyncioHost: asyncio event loop `call_soon` / `call_later`
        - ManualHost: virtual clock driven explicitly (tests, synchronous embedding)
    """

    def call_soon(self, fn: Callable[[], object]) -> None:
        """Run `fn` on a later turn of the host's task queue.

        Args:
            fn: Zero-argument callable.
        """
        ...

    def call_later(self, msecs: float, fn: Callable[[], object]) -> TimerHandle:
        """Run `fn` once `msecs` milliseconds have elapsed.

        Args:
            msecs: Delay in milliseconds.
            fn: Zero-argument callable.

        Returns:
            Handle that cancels the timer.
        """
        ...

    def close(self) -> None:
        """Drop pending callbacks and cancel outstanding timers."""
        ...
