"""ManualHost: deterministic virtual-time host driven by the caller."""

from __future__ import annotations

import heapq
import itertools
from collections import deque
from collections.abc import Callable

__all__ = ['ManualHost']


class _ManualTimer:
    __slots__ = ('cancelled', 'deadline', 'fn', 'seq')

    def __init__(self, deadline: float, seq: int, fn: Callable[[], object]) -> None:
        self.deadline = deadline
        self.seq = seq
        self.fn = fn
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: _ManualTimer) -> bool:
        return (self.deadline, self.seq) < (other.deadline, other.seq)


class ManualHost:
    """Host whose ticks and clock only move when told to.

    Nothing runs until `run_until_idle()` or `advance()` is called, which makes
    scheduling order fully reproducible in tests.

    Example:
        ```python
        host = ManualHost()
        init(host)
        ch = timeout(50)
        host.advance(49)
        assert not ch.is_closed()
        host.advance(1)
        assert ch.is_closed()
        ```
    """

    __slots__ = ('_now', '_seq', '_ticks', '_timers')

    def __init__(self) -> None:
        self._ticks: deque[Callable[[], object]] = deque()
        self._timers: list[_ManualTimer] = []
        self._now = 0.0
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        """Virtual time in milliseconds."""
        return self._now

    @property
    def pending_ticks(self) -> int:
        return len(self._ticks)

    @property
    def pending_timers(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def call_soon(self, fn: Callable[[], object]) -> None:
        self._ticks.append(fn)

    def call_later(self, msecs: float, fn: Callable[[], object]) -> _ManualTimer:
        timer = _ManualTimer(self._now + max(msecs, 0), next(self._seq), fn)
        heapq.heappush(self._timers, timer)
        return timer

    def run_until_idle(self) -> int:
        """Run ticks (including ones they schedule) until none remain.

        Returns:
            Number of ticks run.
        """
        count = 0
        while self._ticks:
            self._ticks.popleft()()
            count += 1
        return count

    def advance(self, msecs: float) -> None:
        """Move the clock forward, firing due timers in deadline order.

        Pending ticks are drained before the first timer and after each one.
        """
        target = self._now + msecs
        self.run_until_idle()
        while self._timers and self._timers[0].deadline <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = timer.deadline
            timer.fn()
            self.run_until_idle()
        self._now = target

    def close(self) -> None:
        self._ticks.clear()
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()
