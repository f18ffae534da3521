"""Processes: generators driven by the instructions they yield.

A process is an ordinary generator. Each `yield` hands the scheduler an
instruction (take, put, sleep, alts); the scheduler performs it and resumes the
generator with the outcome on a later dispatcher tick. Returning from the
generator finishes the process.

Example:
    ```python
    def ping(out):
        for n in range(3):
            yield put(out, n)
        out.close()

    ch = chan()
    go(ping, ch)
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

from cspkit._logging import get_logger, process_context
from cspkit.channels.channel import Channel, chan
from cspkit.channels.handlers import FnHandler
from cspkit.channels.markers import CLOSED, NO_VALUE
from cspkit.instructions import Alts, Put, Sleep, Take
from cspkit.runtime import queue_delay, schedule
from cspkit.select import do_alts

__all__ = [
    'Process',
    'go',
    'offer',
    'poll',
    'put_then_callback',
    'spawn',
    'take_then_callback',
]

logger = get_logger(__name__)

type ProcessGenerator = Generator[Any, Any, Any]


def put_then_callback(
    channel: Channel[Any],
    value: Any,
    callback: Callable[[bool], object] | None = None,
) -> None:
    """Put `value` and report the outcome to `callback`.

    The callback runs in-line when the put completes immediately, otherwise on
    the dispatcher once a taker (or close) resolves it.
    """
    result = channel.put(value, FnHandler(True, callback))
    if result is not None and callback is not None:
        callback(result.value)


def take_then_callback(
    channel: Channel[Any],
    callback: Callable[[Any], object] | None = None,
) -> None:
    """Take a value and hand it (or CLOSED) to `callback`."""
    result = channel.take(FnHandler(True, callback))
    if result is not None and callback is not None:
        callback(result.value)


def poll(channel: Channel[Any]) -> Any:
    """Take a value only if one is available right now.

    Returns:
        The value, or NO_VALUE if nothing is available or the channel is closed.
    """
    if channel.closed:
        return NO_VALUE
    result = channel.take(FnHandler(False))
    return result.value if result is not None else NO_VALUE


def offer(channel: Channel[Any], value: Any) -> bool:
    """Put a value only if it can be delivered right now.

    Returns:
        True if the value went into the buffer or to a waiting taker.
    """
    if channel.closed:
        return False
    return channel.put(value, FnHandler(False)) is not None


class Process:
    """A generator plus the callback to run with its return value.

    Attributes:
        gen: The generator being driven.
        name: Bound as `process` on events logged while a step runs.
        on_finish: Called once with the generator's return value.
        on_error: Called once with the exception if the generator raises.
        finished: True once the generator returned or raised.
    """

    __slots__ = ('finished', 'gen', 'name', 'on_error', 'on_finish')

    def __init__(
        self,
        gen: ProcessGenerator,
        on_finish: Callable[[Any], object],
        on_error: Callable[[Exception], object] | None = None,
    ) -> None:
        self.gen = gen
        self.name: str = getattr(gen, '__qualname__', repr(gen))
        self.on_finish = on_finish
        self.on_error = on_error
        self.finished = False

    def schedule(self, next_state: Any = None) -> None:
        """Resume the generator with `next_state` on a later tick."""
        schedule(self.run, next_state)

    def run(self, state: Any = None) -> None:
        """Resume the generator with `state` and carry out what it yields next.

        Exceptions raised by the generator finish the process and propagate
        to the caller (normally the dispatcher).
        """
        if self.finished:
            return

        with process_context(self.name):
            try:
                instruction = self.gen.send(state)
            except StopIteration as stop:
                self.finished = True
                self.on_finish(stop.value)
                return
            except Exception as exc:
                self.finished = True
                logger.error('process.failed', exc_info=True)
                if self.on_error is not None:
                    self.on_error(exc)
                raise
            self._perform(instruction)

    def _perform(self, instruction: Any) -> None:
        if isinstance(instruction, Take):
            take_then_callback(instruction.channel, self.schedule)
        elif isinstance(instruction, Put):
            put_then_callback(instruction.channel, instruction.value, self.schedule)
        elif isinstance(instruction, Sleep):
            queue_delay(self.schedule, instruction.msecs)
        elif isinstance(instruction, Alts):
            do_alts(instruction.operations, self.schedule, instruction.priority, instruction.default)
        elif isinstance(instruction, Channel):
            take_then_callback(instruction, self.schedule)
        else:
            self.schedule(instruction)


def spawn(
    gen: ProcessGenerator,
    on_error: Callable[[Exception], object] | None = None,
) -> Channel[Any]:
    """Start driving `gen` and return a channel for its result.

    The first step runs immediately. The returned channel receives the
    generator's return value and then closes; a return value of CLOSED (or a
    failure) closes it without a value.

    Args:
        gen: The generator to drive.
        on_error: Called with the exception if the generator raises, before
            the result channel closes.

    Returns:
        Single-slot channel carrying the return value.
    """
    ch: Channel[Any] = chan(1)

    def finish(value: Any) -> None:
        if value is CLOSED:
            ch.close()
        else:
            put_then_callback(ch, value, lambda _ok: ch.close())

    def fail(exc: Exception) -> None:
        if on_error is not None:
            on_error(exc)
        ch.close()

    Process(gen, finish, fail).run(None)
    return ch


def go(fn: Callable[..., ProcessGenerator], *args: Any, **kwargs: Any) -> Channel[Any]:
    """Call generator function `fn` and spawn the generator it returns."""
    return spawn(fn(*args, **kwargs))
