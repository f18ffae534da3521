"""AsyncioHost: dispatcher ticks and timers on an asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

__all__ = ['AsyncioHost']


class AsyncioHost:
    """Host backed by an asyncio event loop.

    The loop is resolved lazily on first use, so a host can be created before
    the loop starts (e.g. inside `anyio.run`). Timer handles are tracked so
    `close()` can cancel those still pending.

    Attributes:
        _loop: The bound event loop, or None until first use.
        _timers: Outstanding timer handles.
    """

    __slots__ = ('_closed', '_loop', '_timers')

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Create an asyncio host.

        Args:
            loop: Event loop to use. Defaults to the running loop at first use.
        """
        self._loop = loop
        self._timers: set[asyncio.TimerHandle] = set()
        self._closed = False

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                msg = 'AsyncioHost needs a running event loop; use cspkit.run() or the manual host'
                raise RuntimeError(msg) from None
        return self._loop

    def call_soon(self, fn: Callable[[], object]) -> None:
        if self._closed:
            return
        self._get_loop().call_soon(fn)

    def call_later(self, msecs: float, fn: Callable[[], object]) -> asyncio.TimerHandle:
        handle: asyncio.TimerHandle | None = None

        def fire() -> None:
            self._timers.discard(handle)  # type: ignore[arg-type]
            fn()

        handle = self._get_loop().call_later(max(msecs, 0) / 1000, fire)
        self._timers.add(handle)
        return handle

    def close(self) -> None:
        self._closed = True
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
