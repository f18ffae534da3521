"""Channel: the put/take/close rendezvous protocol.

A channel owns an optional buffer, a reducer every buffered value is stepped
through, and two FIFO rings of pending operations (takers and putters). Every
operation either completes immediately (returning a `Box`) or is queued
(returning None); the other side's continuation is always scheduled on the
dispatcher, never called in-line.
"""

from __future__ import annotations

import itertools
from functools import partial
from typing import TYPE_CHECKING, Any

from cspkit._config import DEFAULT_RING_CAPACITY, MAX_DIRTY, MAX_QUEUE_SIZE
from cspkit._logging import get_logger
from cspkit.channels.buffers import fixed, promise
from cspkit.channels.handlers import Box, PutBox
from cspkit.channels.markers import CLOSED
from cspkit.channels.ring import RingBuffer, ring
from cspkit.channels.transforms import ADD_REDUCER, default_exception_handler, is_reduced, with_exception_handler
from cspkit.errors import ClosedPayload, QueueOverflow, TransformWithoutBuffer
from cspkit.runtime import current_config, schedule

if TYPE_CHECKING:
    from cspkit.channels.protocols import Buffer, Handler, Reducer
    from cspkit.channels.transforms import ExceptionHandler, Transform

__all__ = ['MAX_DIRTY', 'MAX_QUEUE_SIZE', 'Channel', 'chan', 'promise_chan']

logger = get_logger(__name__)

_channel_ids = itertools.count(1)


class Channel[T]:
    """A CSP channel.

    Within one channel, pending takers and pending putters are each served in
    FIFO order. Closing is the only terminal transition.

    Attributes:
        id: Stable identity, unique per process.
        buf: Buffer, or None for a rendezvous channel.
        xform: Reducer values are stepped through into the buffer.
        takes: Pending take handlers.
        puts: Pending put requests.
        dirty_takes: Takes queued since the last sweep of `takes`.
        dirty_puts: Puts queued since the last sweep of `puts`.
        closed: Whether close() has run.
    """

    __slots__ = (
        'buf',
        'closed',
        'dirty_puts',
        'dirty_takes',
        'id',
        'max_dirty',
        'max_queue_size',
        'puts',
        'takes',
        'xform',
    )

    def __init__(
        self,
        takes: RingBuffer[Handler],
        puts: RingBuffer[PutBox[T]],
        buf: Buffer[T] | None,
        xform: Reducer,
        *,
        max_dirty: int = MAX_DIRTY,
        max_queue_size: int = MAX_QUEUE_SIZE,
    ) -> None:
        self.id = next(_channel_ids)
        self.buf = buf
        self.xform = xform
        self.takes = takes
        self.puts = puts
        self.dirty_takes = 0
        self.dirty_puts = 0
        self.closed = False
        self.max_dirty = max_dirty
        self.max_queue_size = max_queue_size

    def put(self, value: T, handler: Handler) -> Box[bool] | None:
        """Offer `value` through `handler`.

        Returns:
            Box(True) if delivered (into the buffer or to a taker), Box(False)
            if the channel is closed, or None if the put was queued or the
            handler is no longer active.

        Raises:
            ClosedPayloadError: If `value` is CLOSED.
            QueueOverflowError: If queueing would exceed `max_queue_size`.
        """
        if value is CLOSED:
            raise ClosedPayload().to_exception()

        if not handler.is_active():
            return None

        if self.closed:
            handler.commit()
            return Box(False)

        # Soak the value through the buffer first, even with takers waiting,
        # so the transform sees every value.
        buf = self.buf
        if buf is not None and not buf.is_full():
            handler.commit()
            done = is_reduced(self.xform.step(buf, value))
            self._drain_buffer_to_takers()
            if done:
                self.close()
            return Box(True)

        # Full buffer (so no pending takers) or no buffer: hand off directly.
        while self.takes.length:
            taker = self.takes.pop()
            if taker.is_active():
                handler.commit()
                schedule(taker.commit(), value)
                return Box(True)

        if self.dirty_puts > self.max_dirty:
            self.puts.cleanup(lambda putter: putter.handler.is_active())
            self.dirty_puts = 0
        else:
            self.dirty_puts += 1

        if handler.is_blockable():
            if self.puts.length >= self.max_queue_size:
                logger.error('channel.queue_overflow', channel_id=self.id, side='puts', limit=self.max_queue_size)
                raise QueueOverflow('puts', self.max_queue_size).to_exception()
            self.puts.unbounded_unshift(PutBox(handler, value))

        return None

    def take(self, handler: Handler) -> Box[Any] | None:
        """Request a value through `handler`.

        Returns:
            Box(value) if a value was available, Box(CLOSED) if the channel is
            closed and drained, or None if the take was queued or the handler
            is no longer active.

        Raises:
            QueueOverflowError: If queueing would exceed `max_queue_size`.
        """
        if not handler.is_active():
            return None

        buf = self.buf
        if buf is not None and buf.count() > 0:
            handler.commit()
            value = buf.remove()
            # Refill from pending puts now, otherwise they would wait until
            # the next sweep.
            while self.puts.length and not buf.is_full():
                putter = self.puts.pop()
                if putter.handler.is_active():
                    schedule(putter.handler.commit(), True)
                    if is_reduced(self.xform.step(buf, putter.value)):
                        self.close()
            return Box(value)

        # Empty buffer (so no pending puts) or no buffer: take directly.
        while self.puts.length:
            putter = self.puts.pop()
            if putter.handler.is_active():
                handler.commit()
                schedule(putter.handler.commit(), True)
                return Box(putter.value)

        if self.closed:
            handler.commit()
            return Box(CLOSED)

        if self.dirty_takes > self.max_dirty:
            self.takes.cleanup(lambda taker: taker.is_active())
            self.dirty_takes = 0
        else:
            self.dirty_takes += 1

        if handler.is_blockable():
            if self.takes.length >= self.max_queue_size:
                logger.error('channel.queue_overflow', channel_id=self.id, side='takes', limit=self.max_queue_size)
                raise QueueOverflow('takes', self.max_queue_size).to_exception()
            self.takes.unbounded_unshift(handler)

        return None

    def close(self) -> None:
        """Close the channel. Idempotent.

        Runs the transform's terminal step, hands remaining buffered values to
        waiting takers, then resolves every other pending taker with CLOSED
        and every pending putter with False.
        """
        if self.closed:
            return
        self.closed = True

        if self.buf is not None:
            self.xform.result(self.buf)
            self.buf.close_buffer()
            self._drain_buffer_to_takers()

        while self.takes.length:
            taker = self.takes.pop()
            if taker.is_active():
                schedule(taker.commit(), CLOSED)

        while self.puts.length:
            putter = self.puts.pop()
            if putter.handler.is_active():
                schedule(putter.handler.commit(), False)

    def is_closed(self) -> bool:
        return self.closed

    def _drain_buffer_to_takers(self) -> None:
        buf = self.buf
        while buf.count() > 0 and self.takes.length:
            taker = self.takes.pop()
            if taker.is_active():
                schedule(taker.commit(), buf.remove())

    def __repr__(self) -> str:
        kind = type(self.buf).__name__ if self.buf is not None else 'unbuffered'
        state = 'closed' if self.closed else 'open'
        return f'<Channel #{self.id} {kind} {state}>'


def chan[T](
    buffer_or_n: Buffer[T] | int | None = None,
    xform: Transform | None = None,
    ex_handler: ExceptionHandler | None = None,
) -> Channel[T]:
    """Create a channel.

    Args:
        buffer_or_n: A buffer, a size for a fixed buffer (0 means unbuffered),
            or None for an unbuffered rendezvous channel.
        xform: Transform applied to values entering the buffer. Requires a buffer.
        ex_handler: Called with exceptions raised by the transform; a return
            value other than CLOSED is added to the buffer instead.

    Returns:
        A new Channel.

    Raises:
        TransformWithoutBufferError: If `xform` is given without a buffer.
        InvalidCapacityError: If `buffer_or_n` is a negative size.

    Example:
        ```python
        ch = chan(fixed(1))
        assert offer(ch, 'x')
        assert poll(ch) == 'x'
        ```
    """
    if isinstance(buffer_or_n, int):
        buf: Buffer[T] | None = fixed(buffer_or_n) if buffer_or_n != 0 else None
    else:
        buf = buffer_or_n

    if xform is not None:
        if buf is None:
            raise TransformWithoutBuffer().to_exception()
        reducer = xform(ADD_REDUCER)
    else:
        reducer = ADD_REDUCER

    config = current_config()
    capacity = config.ring_capacity if config else DEFAULT_RING_CAPACITY
    ch: Channel[T] = Channel(
        ring(capacity),
        ring(capacity),
        buf,
        reducer,
        max_dirty=config.max_dirty if config else MAX_DIRTY,
        max_queue_size=config.max_queue_size if config else MAX_QUEUE_SIZE,
    )
    ch.xform = with_exception_handler(reducer, ex_handler or partial(default_exception_handler, channel_id=ch.id))
    return ch


def promise_chan[T](
    xform: Transform | None = None,
    ex_handler: ExceptionHandler | None = None,
) -> Channel[T]:
    """Create a channel backed by a promise buffer.

    The first value put is delivered to every take, forever.
    """
    return chan(promise(), xform, ex_handler)
