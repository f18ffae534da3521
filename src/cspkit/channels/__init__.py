"""Channels: buffers, handlers, transforms and the put/take/close protocol.

- `chan(buffer_or_n, xform, ex_handler)`: create a channel
- `promise_chan()`: single-value channel delivered to every taker
- `fixed(n)`, `dropping(n)`, `sliding(n)`, `promise()`: buffer policies
- `FnHandler`, `AltHandler`: pending-operation handlers
- `CLOSED`, `NO_VALUE`, `DEFAULT`: engine markers

The import order below matters: `ring` and `buffers` must be loaded before
`channel`, which pulls in the runtime and dispatcher.
"""

from cspkit.channels.markers import CLOSED, DEFAULT, NO_VALUE, Marker
from cspkit.channels.ring import RingBuffer, ring
from cspkit.channels.buffers import (
    DroppingBuffer,
    FixedBuffer,
    PromiseBuffer,
    SlidingBuffer,
    dropping,
    fixed,
    promise,
    sliding,
)
from cspkit.channels.handlers import AltHandler, Box, FnHandler, PutBox
from cspkit.channels.protocols import Buffer, Handler, Reducer
from cspkit.channels.transforms import Reduced, compose, filtering, is_reduced, mapping, taking
from cspkit.channels.channel import MAX_DIRTY, MAX_QUEUE_SIZE, Channel, chan, promise_chan

__all__ = [
    'CLOSED',
    'DEFAULT',
    'MAX_DIRTY',
    'MAX_QUEUE_SIZE',
    'NO_VALUE',
    'AltHandler',
    'Box',
    'Buffer',
    'Channel',
    'DroppingBuffer',
    'FixedBuffer',
    'FnHandler',
    'Handler',
    'Marker',
    'PromiseBuffer',
    'PutBox',
    'Reduced',
    'Reducer',
    'RingBuffer',
    'SlidingBuffer',
    'chan',
    'compose',
    'dropping',
    'filtering',
    'fixed',
    'is_reduced',
    'mapping',
    'promise',
    'promise_chan',
    'ring',
    'sliding',
    'taking',
]
