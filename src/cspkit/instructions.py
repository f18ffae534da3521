"""Instructions: inert effect descriptors a process yields to the scheduler.

    ```python
    def worker(inbox, outbox):
        while (item := (yield take(inbox))) is not CLOSED:
            yield sleep(10)
            yield put(outbox, item * 2)
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import msgspec

from cspkit.channels.markers import NO_VALUE

__all__ = ['Alts', 'Put', 'Sleep', 'Take', 'alts', 'put', 'sleep', 'take']


class Take(msgspec.Struct, frozen=True):
    """Take a value from `channel`; the process resumes with it (or CLOSED)."""

    channel: Any


class Put(msgspec.Struct, frozen=True):
    """Put `value` on `channel`; the process resumes with True or False."""

    channel: Any
    value: Any


class Sleep(msgspec.Struct, frozen=True, gc=False):
    """Resume the process with None after `msecs` milliseconds."""

    msecs: float


class Alts(msgspec.Struct, frozen=True):
    """Race channel operations; the process resumes with an AltResult.

    Each operation is a channel (take) or a `(channel, value)` pair (put).
    """

    operations: tuple[Any, ...]
    priority: bool = False
    default: Any = NO_VALUE


def take(channel: Any) -> Take:
    return Take(channel)


def put(channel: Any, value: Any) -> Put:
    return Put(channel, value)


def sleep(msecs: float) -> Sleep:
    return Sleep(msecs)


def alts(operations: Iterable[Any], *, priority: bool = False, default: Any = NO_VALUE) -> Alts:
    """Build an alts instruction.

    Args:
        operations: Channels to take from and `(channel, value)` pairs to put.
        priority: Try operations in the given order instead of a random one.
        default: Value to resume with (paired with DEFAULT) when nothing is
            ready immediately. Omit to wait.

    Example:
        ```python
        value, ch = yield alts([inbox, timeout(100)])
        if ch is not inbox:
            ...  # timed out
        ```
    """
    return Alts(tuple(operations), priority, default)
