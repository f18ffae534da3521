"""cspkit: CSP channels and generator processes on a cooperative dispatcher.

Provides rendezvous channels with pluggable buffering, processes written as
generators that yield take/put/sleep/alts instructions, and fair selection
across several channel operations. All work runs on one logical thread,
driven by a batched dispatcher on top of a host event source (asyncio, or a
manual virtual clock for tests).

Example:
    ```python
    import cspkit
    from cspkit import CLOSED, chan, go, put, take

    def producer(ch):
        for n in range(3):
            yield put(ch, n)
        ch.close()

    def main():
        ch = chan()
        go(producer, ch)
        seen = []
        while (value := (yield take(ch))) is not CLOSED:
            seen.append(value)
        return seen

    assert cspkit.run(main) == [0, 1, 2]
    ```
"""

from cspkit.channels import (
    CLOSED,
    DEFAULT,
    MAX_DIRTY,
    MAX_QUEUE_SIZE,
    NO_VALUE,
    Channel,
    Reduced,
    chan,
    compose,
    dropping,
    filtering,
    fixed,
    mapping,
    promise,
    promise_chan,
    sliding,
    taking,
)
from cspkit._config import DEFAULT_RING_CAPACITY, TASK_BATCH_SIZE, EngineConfig, Host
from cspkit._hosts.loop import AsyncioHost
from cspkit._hosts.manual import ManualHost
from cspkit.bridge import join, put_async, run, take_async
from cspkit.dispatch import Dispatcher
from cspkit.errors import (
    ClosedPayloadError,
    EmptyAltsError,
    InvalidCapacityError,
    QueueOverflowError,
    TransformWithoutBufferError,
    UsageError,
)
from cspkit.instructions import Alts, Put, Sleep, Take, alts, put, sleep, take
from cspkit.operations import from_iterable, into, merge, onto, pipe, reduce, split, take_n
from cspkit.process import Process, go, offer, poll, put_then_callback, spawn, take_then_callback
from cspkit.runtime import Runtime, get_runtime, init, shutdown
from cspkit.select import AltResult, do_alts
from cspkit.timers import timeout

__all__ = [
    # Markers
    'CLOSED',
    'DEFAULT',
    'DEFAULT_RING_CAPACITY',
    # Constants
    'MAX_DIRTY',
    'MAX_QUEUE_SIZE',
    'NO_VALUE',
    'TASK_BATCH_SIZE',
    'AltResult',
    'Alts',
    # Hosts
    'AsyncioHost',
    # Channels
    'Channel',
    # Errors
    'ClosedPayloadError',
    'Dispatcher',
    'EmptyAltsError',
    # Config
    'EngineConfig',
    'Host',
    'InvalidCapacityError',
    'ManualHost',
    # Processes
    'Process',
    'Put',
    'QueueOverflowError',
    'Reduced',
    # Runtime
    'Runtime',
    'Sleep',
    # Instructions
    'Take',
    'TransformWithoutBufferError',
    'UsageError',
    'alts',
    'chan',
    'compose',
    'do_alts',
    'dropping',
    'filtering',
    'fixed',
    'from_iterable',
    'get_runtime',
    'go',
    'init',
    'into',
    'join',
    'mapping',
    'merge',
    'offer',
    'onto',
    'pipe',
    'poll',
    'promise',
    'promise_chan',
    'put',
    'put_async',
    'put_then_callback',
    'reduce',
    'run',
    'shutdown',
    'sleep',
    'sliding',
    'spawn',
    'split',
    'take',
    'take_async',
    'take_n',
    'take_then_callback',
    'taking',
    'timeout',
]
