"""Timers: channels that close themselves after a delay."""

from __future__ import annotations

from typing import Any

from cspkit.channels.channel import Channel, chan
from cspkit.runtime import queue_delay

__all__ = ['timeout']


def timeout(msecs: float) -> Channel[Any]:
    """Create a channel that closes after `msecs` milliseconds.

    It never carries a value; race it with alts to bound a wait.

    Example:
        ```python
        value, ch = yield alts([results, timeout(500)])
        if value is CLOSED and ch is not results:
            ...  # gave up after 500ms
        ```
    """
    ch: Channel[Any] = chan()
    queue_delay(ch.close, msecs)
    return ch
