"""Select (alts): commit to exactly one of several channel operations."""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from cspkit.channels.channel import Channel
from cspkit.channels.handlers import AltHandler, Box
from cspkit.channels.markers import DEFAULT, NO_VALUE
from cspkit.errors import EmptyAlts

__all__ = ['AltResult', 'do_alts']


class AltResult(NamedTuple):
    """Outcome of an alts: the value and the channel that produced it.

    For a take the value is what was taken (or CLOSED); for a put it is the
    put's success flag. `channel` is DEFAULT when the default branch won.
    """

    value: Any
    channel: Any


def _order(count: int, priority: bool) -> list[int]:
    indexes = list(range(count))
    if not priority:
        random.shuffle(indexes)
    return indexes


def do_alts(
    operations: Sequence[Any],
    callback: Callable[[AltResult], object],
    priority: bool = False,
    default: Any = NO_VALUE,
) -> None:
    """Attempt `operations` and report the single winner to `callback`.

    Operations are tried in random order (or in the given order when
    `priority` is set). Each one registers an AltHandler sharing one flag,
    so the first operation that can complete immediately wins and stops the
    scan; operations not reached are never registered. If none completes and
    a `default` was given, the default wins with channel DEFAULT. Otherwise
    the registered handlers race and the first channel to satisfy one wins;
    the rest turn inactive and are swept from their channels later.

    Args:
        operations: Channels (take) and `(channel, value)` pairs (put).
        callback: Receives the AltResult exactly once.
        priority: Try operations in order instead of randomly.
        default: Value reported when nothing is immediately ready.

    Raises:
        EmptyAltsError: If `operations` is empty.
    """
    if not operations:
        raise EmptyAlts().to_exception()

    flag: Box[bool] = Box(True)

    for index in _order(len(operations), priority):
        operation = operations[index]
        if isinstance(operation, Channel):
            ch = operation
            result = ch.take(AltHandler(flag, _deliver(callback, ch)))
        else:
            ch, value = operation
            result = ch.put(value, AltHandler(flag, _deliver(callback, ch)))

        if result is not None:
            callback(AltResult(result.value, ch))
            return

    if default is not NO_VALUE and flag.value:
        flag.value = False
        callback(AltResult(default, DEFAULT))


def _deliver(callback: Callable[[AltResult], object], ch: Channel[Any]) -> Callable[[Any], object]:
    return lambda value: callback(AltResult(value, ch))
