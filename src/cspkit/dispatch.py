"""Dispatcher: batched trampoline for channel and process continuations.

Every continuation the engine produces (a taker receiving a value, a putter
learning its outcome, a process being resumed) is queued here instead of
being called in-line. A single host tick drains up to `batch_size` of them, so
arbitrarily long chains of synchronous completions never deepen the stack.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from cspkit._config import DEFAULT_RING_CAPACITY, TASK_BATCH_SIZE
from cspkit.channels.ring import RingBuffer, ring

if TYPE_CHECKING:
    from cspkit._hosts import DispatchHost, TimerHandle

__all__ = ['Dispatcher']


class Dispatcher:
    """Queue of zero-argument continuations drained on host ticks.

    At most one tick is armed at a time. A tick that leaves work behind (batch
    exhausted, or a continuation raised) arms the next one before returning.

    Attributes:
        _tasks: Ring of queued continuations.
        _queued: A host tick is armed and has not started yet.
        _running: A batch is being drained.
    """

    __slots__ = ('_batch_size', '_host', '_queued', '_running', '_shut_down', '_tasks')

    def __init__(
        self,
        host: DispatchHost,
        batch_size: int = TASK_BATCH_SIZE,
        ring_capacity: int = DEFAULT_RING_CAPACITY,
    ) -> None:
        """Create a dispatcher.

        Args:
            host: Event source providing ticks and timers.
            batch_size: Continuations run per tick.
            ring_capacity: Initial capacity of the task ring.
        """
        self._host = host
        self._batch_size = batch_size
        self._tasks: RingBuffer[Callable[[], object]] = ring(ring_capacity)
        self._queued = False
        self._running = False
        self._shut_down = False

    @property
    def host(self) -> DispatchHost:
        return self._host

    @property
    def pending(self) -> int:
        """Number of queued continuations."""
        return self._tasks.length

    def run(self, fn: Callable[[], object]) -> None:
        """Queue a continuation for a later tick.

        Raises:
            RuntimeError: If the dispatcher has been shut down.
        """
        if self._shut_down:
            msg = 'Dispatcher is shut down'
            raise RuntimeError(msg)
        self._tasks.unbounded_unshift(fn)
        self._arm()

    def queue_delay(self, fn: Callable[[], object], msecs: float) -> TimerHandle:
        """Run `fn` after `msecs` milliseconds via the host timer."""
        if self._shut_down:
            msg = 'Dispatcher is shut down'
            raise RuntimeError(msg)
        return self._host.call_later(msecs, fn)

    def _arm(self) -> None:
        if self._queued or self._running:
            return
        self._queued = True
        self._host.call_soon(self._drain)

    def _drain(self) -> None:
        if self._shut_down:
            return
        self._queued = False
        self._running = True
        count = 0
        try:
            while count < self._batch_size and self._tasks.length:
                task = self._tasks.pop()
                count += 1
                task()  # type: ignore[misc]
        finally:
            self._running = False
            if self._tasks.length and not self._shut_down:
                self._arm()

    def shutdown(self) -> None:
        """Discard queued work, cancel host timers and refuse new work."""
        self._shut_down = True
        while self._tasks.length:
            self._tasks.pop()
        self._host.close()
