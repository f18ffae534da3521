"""Async bridge: await channel operations from anyio/asyncio code.

The bridge registers an ordinary alt-guarded handler on the channel and
waits on an `anyio.Event`. The handler's continuation runs on the
dispatcher, which must be driven by the same event loop (the asyncio host).

Cancellation: if the awaiting task is cancelled before the operation
commits, the handler's flag is cleared, so the pending operation is dead and
is swept from the channel later. Once the operation has committed the other
side already counts the hand-off as done, so the task waits (shielded) for
the value and returns it instead of raising.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import anyio

from cspkit.channels.channel import Channel
from cspkit.channels.handlers import AltHandler, Box
from cspkit.process import ProcessGenerator, spawn
from cspkit.runtime import init, shutdown

__all__ = ['join', 'put_async', 'run', 'take_async']


async def _await_operation(register: Callable[[AltHandler], Box[Any] | None]) -> Any:
    flag: Box[bool] = Box(True)
    event = anyio.Event()
    outcome: list[Any] = []

    def deliver(value: Any) -> None:
        outcome.append(value)
        event.set()

    result = register(AltHandler(flag, deliver))
    if result is not None:
        return result.value

    try:
        await event.wait()
    except anyio.get_cancelled_exc_class():
        if flag.value:
            flag.value = False
            raise
        # Committed but not yet delivered: the continuation is already queued
        # on the dispatcher.
        with anyio.CancelScope(shield=True):
            await event.wait()
    return outcome[0]


async def take_async(channel: Channel[Any]) -> Any:
    """Await the next value of `channel` (CLOSED once closed and drained).

    Example:
        ```python
        value = await take_async(results)
        ```
    """
    return await _await_operation(channel.take)


async def put_async(channel: Channel[Any], value: Any) -> bool:
    """Await delivery of `value` to `channel`.

    Returns:
        True if delivered, False if the channel closed first.
    """
    return await _await_operation(lambda handler: channel.put(value, handler))


async def join(gen: ProcessGenerator) -> Any:
    """Spawn `gen` and await its return value.

    Returns:
        Whatever the generator returned, including None. CLOSED only if the
        generator itself returned CLOSED.

    Raises:
        Exception: Whatever the generator raised.
    """
    failures: list[Exception] = []
    value = await take_async(spawn(gen, failures.append))
    if failures:
        raise failures[0]
    return value


def run(fn: Callable[..., ProcessGenerator], *args: Any, **kwargs: Any) -> Any:
    """Run generator function `fn` to completion on a fresh asyncio runtime.

    Initialises an asyncio-host runtime, drives the process, shuts the
    runtime down and returns the process's return value. An exception raised
    by the process is re-raised here.

    Example:
        ```python
        def main():
            ch = chan()
            go(producer, ch)
            total = 0
            while (value := (yield take(ch))) is not CLOSED:
                total += value
            return total

        print(cspkit.run(main))
        ```
    """

    async def main() -> Any:
        init('asyncio')
        try:
            return await join(fn(*args, **kwargs))
        finally:
            shutdown()

    return anyio.run(main, backend='asyncio')
