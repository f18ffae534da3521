"""Handlers (pending takes/puts) and the boxes that carry results between them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from cspkit.channels.protocols import Handler

__all__ = ['AltHandler', 'Box', 'FnHandler', 'PutBox']


def _noop(_value: Any = None) -> None:
    return None


class Box[T]:
    """Mutable single-value cell.

    Returned by `Channel.put`/`Channel.take` when an operation completes
    immediately, and shared between the handlers of one alts call as the
    exclusivity flag.
    """

    __slots__ = ('value',)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f'Box({self.value!r})'


class PutBox[T]:
    """A queued put: the handler waiting to be resumed plus its value."""

    __slots__ = ('handler', 'value')

    def __init__(self, handler: Handler, value: T) -> None:
        self.handler = handler
        self.value = value


class FnHandler:
    """Always-active handler wrapping a plain callback.

    Used for callback-style put/take and, with `blockable=False`, for
    poll/offer which must never wait in a pending queue.
    """

    __slots__ = ('blockable', 'fn')

    def __init__(self, blockable: bool, fn: Callable[[Any], Any] | None = None) -> None:
        self.blockable = blockable
        self.fn = fn or _noop

    def is_active(self) -> bool:
        return True

    def is_blockable(self) -> bool:
        return self.blockable

    def commit(self) -> Callable[[Any], Any]:
        return self.fn


class AltHandler:
    """Handler guarded by a flag shared with its sibling alts branches.

    Active only while `flag.value` is true. `commit` clears the flag, so the
    first branch to commit wins and every sibling reports inactive afterwards.
    """

    __slots__ = ('flag', 'fn')

    def __init__(self, flag: Box[bool], fn: Callable[[Any], Any]) -> None:
        self.flag = flag
        self.fn = fn

    def is_active(self) -> bool:
        return self.flag.value

    def is_blockable(self) -> bool:
        return True

    def commit(self) -> Callable[[Any], Any]:
        self.flag.value = False
        return self.fn
