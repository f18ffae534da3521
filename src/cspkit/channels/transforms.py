"""Transforms: reducer-to-reducer functions applied to values entering a channel buffer.

A transform is any callable `xform(reducer) -> reducer`. The innermost reducer
is `ADD_REDUCER`, which adds each value to the buffer; a transform wraps it to
map, filter or cut values short. A step returning `Reduced` asks the channel to
close once the current value has been delivered.

Example:
    ```python
    ch = chan(fixed(10), compose(mapping(str.upper), taking(2)))
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cspkit._logging import get_logger
from cspkit.channels.markers import CLOSED

if TYPE_CHECKING:
    from collections.abc import Callable

    from cspkit.channels.protocols import Reducer

__all__ = [
    'ADD_REDUCER',
    'Reduced',
    'compose',
    'default_exception_handler',
    'filtering',
    'is_reduced',
    'mapping',
    'taking',
    'with_exception_handler',
]

type Transform = Callable[[Reducer], Reducer]
type ExceptionHandler = Callable[[Exception], Any]

logger = get_logger(__name__)


class Reduced:
    """Wraps an accumulator to signal early termination."""

    __slots__ = ('value',)

    def __init__(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f'Reduced({self.value!r})'


def is_reduced(value: Any) -> bool:
    """Whether a step result requests early termination."""
    return isinstance(value, Reduced)


class _AddReducer:
    __slots__ = ()

    def step(self, buffer: Any, item: Any) -> Any:
        buffer.add(item)
        return buffer

    def result(self, buffer: Any) -> Any:
        return buffer


ADD_REDUCER: Reducer = _AddReducer()


class _Mapping:
    __slots__ = ('f', 'rf')

    def __init__(self, f: Callable[[Any], Any], rf: Reducer) -> None:
        self.f = f
        self.rf = rf

    def step(self, acc: Any, item: Any) -> Any:
        return self.rf.step(acc, self.f(item))

    def result(self, acc: Any) -> Any:
        return self.rf.result(acc)


class _Filtering:
    __slots__ = ('pred', 'rf')

    def __init__(self, pred: Callable[[Any], bool], rf: Reducer) -> None:
        self.pred = pred
        self.rf = rf

    def step(self, acc: Any, item: Any) -> Any:
        if self.pred(item):
            return self.rf.step(acc, item)
        return acc

    def result(self, acc: Any) -> Any:
        return self.rf.result(acc)


class _Taking:
    __slots__ = ('remaining', 'rf')

    def __init__(self, n: int, rf: Reducer) -> None:
        self.remaining = n
        self.rf = rf

    def step(self, acc: Any, item: Any) -> Any:
        if self.remaining > 0:
            self.remaining -= 1
            acc = self.rf.step(acc, item)
        if self.remaining <= 0 and not is_reduced(acc):
            return Reduced(acc)
        return acc

    def result(self, acc: Any) -> Any:
        return self.rf.result(acc)


def mapping(f: Callable[[Any], Any]) -> Transform:
    """Transform applying `f` to every value."""
    return lambda rf: _Mapping(f, rf)


def filtering(pred: Callable[[Any], bool]) -> Transform:
    """Transform keeping only values for which `pred` is true."""
    return lambda rf: _Filtering(pred, rf)


def taking(n: int) -> Transform:
    """Transform admitting the first `n` values, then requesting termination.

    A channel built with `taking(n)` closes itself after its n-th value.
    """
    return lambda rf: _Taking(n, rf)


def compose(*xforms: Transform) -> Transform:
    """Chain transforms; values flow through them left to right."""

    def composed(rf: Reducer) -> Reducer:
        for xform in reversed(xforms):
            rf = xform(rf)
        return rf

    return composed


# --- Exception recovery ---


def default_exception_handler(exc: Exception, channel_id: int | None = None) -> Any:
    """Log the failure and admit nothing.

    `chan()` binds `channel_id` so the event names the failing channel.
    """
    logger.error('channel.transform_error', channel_id=channel_id, error=repr(exc), exc_info=exc)
    return CLOSED


class _ExceptionGuard:
    """Routes step/result errors to an exception handler.

    A handler result other than CLOSED is added to the buffer in place of the
    failed value. The guard returns the buffer itself, never `Reduced`, so a
    failing transform never closes the channel on its own.
    """

    __slots__ = ('ex_handler', 'rf')

    def __init__(self, rf: Reducer, ex_handler: ExceptionHandler) -> None:
        self.rf = rf
        self.ex_handler = ex_handler

    def _recover(self, buffer: Any, exc: Exception) -> Any:
        replacement = self.ex_handler(exc)
        if replacement is not CLOSED:
            buffer.add(replacement)
        return buffer

    def step(self, buffer: Any, item: Any) -> Any:
        try:
            return self.rf.step(buffer, item)
        except Exception as exc:
            return self._recover(buffer, exc)

    def result(self, buffer: Any) -> Any:
        try:
            return self.rf.result(buffer)
        except Exception as exc:
            return self._recover(buffer, exc)


def with_exception_handler(rf: Reducer, ex_handler: ExceptionHandler | None = None) -> Reducer:
    """Wrap a reducer so transform errors go to `ex_handler` (default: log and drop)."""
    return _ExceptionGuard(rf, ex_handler or default_exception_handler)
