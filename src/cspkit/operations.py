"""Channel operations built from processes: piping, folding, merging, splitting.

Everything here is ordinary process code on top of the public engine; none of
it touches channel internals.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from cspkit.channels.channel import Channel, chan
from cspkit.channels.markers import CLOSED
from cspkit.channels.protocols import Buffer
from cspkit.instructions import alts, put, take
from cspkit.process import go

__all__ = ['from_iterable', 'into', 'merge', 'onto', 'pipe', 'reduce', 'split', 'take_n']

type BufferOrN = Buffer[Any] | int | None


def pipe(src: Channel[Any], dst: Channel[Any], keep_open: bool = False) -> Channel[Any]:
    """Copy values from `src` to `dst` until `src` closes or `dst` refuses one.

    Closes `dst` when `src` closes unless `keep_open` is set.

    Returns:
        `dst`.
    """

    def copy() -> Any:
        while True:
            value = yield take(src)
            if value is CLOSED:
                if not keep_open:
                    dst.close()
                return None
            if not (yield put(dst, value)):
                return None

    go(copy)
    return dst


def onto(ch: Channel[Any], items: Iterable[Any], keep_open: bool = False) -> Channel[Any]:
    """Put every item on `ch` in order, then close it unless `keep_open`.

    Returns:
        Channel that closes once every item has been put.
    """

    def feed() -> Any:
        for item in items:
            yield put(ch, item)
        if not keep_open:
            ch.close()
        return CLOSED

    return go(feed)


def from_iterable(items: Iterable[Any]) -> Channel[Any]:
    """Channel pre-filled with `items`, closed once they are all buffered."""
    values = list(items)
    ch: Channel[Any] = chan(len(values) or None)
    onto(ch, values)
    return ch


def reduce(f: Callable[[Any, Any], Any], init: Any, ch: Channel[Any]) -> Channel[Any]:
    """Fold every value of `ch` into `init`.

    Returns:
        Channel yielding the final accumulator once `ch` closes.
    """

    def fold() -> Any:
        acc = init
        while True:
            value = yield take(ch)
            if value is CLOSED:
                return acc
            acc = f(acc, value)

    return go(fold)


def into(collection: list[Any], ch: Channel[Any]) -> Channel[Any]:
    """Collect every value of `ch` into a copy of `collection`."""

    def append(acc: list[Any], item: Any) -> list[Any]:
        acc.append(item)
        return acc

    return reduce(append, list(collection), ch)


def merge(channels: Iterable[Channel[Any]], buffer_or_n: BufferOrN = None) -> Channel[Any]:
    """Interleave values from `channels` into one channel.

    The output closes once every input has closed.
    """
    out: Channel[Any] = chan(buffer_or_n)
    actives = list(channels)

    def forward() -> Any:
        while actives:
            value, ch = yield alts(actives)
            if value is CLOSED:
                actives.remove(ch)
            else:
                yield put(out, value)
        out.close()

    go(forward)
    return out


def split(
    pred: Callable[[Any], bool],
    ch: Channel[Any],
    true_buffer_or_n: BufferOrN = None,
    false_buffer_or_n: BufferOrN = None,
) -> tuple[Channel[Any], Channel[Any]]:
    """Route values of `ch` by `pred`.

    Returns:
        `(matching, non_matching)` channels, both closed when `ch` closes.
    """
    true_ch: Channel[Any] = chan(true_buffer_or_n)
    false_ch: Channel[Any] = chan(false_buffer_or_n)

    def route() -> Any:
        while True:
            value = yield take(ch)
            if value is CLOSED:
                true_ch.close()
                false_ch.close()
                return None
            yield put(true_ch if pred(value) else false_ch, value)

    go(route)
    return true_ch, false_ch


def take_n(n: int, ch: Channel[Any], buffer_or_n: BufferOrN = None) -> Channel[Any]:
    """Channel with at most the first `n` values of `ch`, then closed."""
    out: Channel[Any] = chan(buffer_or_n)

    def forward() -> Any:
        for _ in range(n):
            value = yield take(ch)
            if value is CLOSED:
                break
            yield put(out, value)
        out.close()

    go(forward)
    return out
