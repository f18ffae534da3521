"""Usage errors: dual struct+exception for value-passing and raise-based code.

Usage errors are raised synchronously at the offending call and are never
recovered by the engine. Errors raised by a channel transform are a different
kind: they are routed to the channel's exception handler instead (see
`cspkit.channels.transforms`).
"""

from __future__ import annotations

import msgspec

__all__ = [
    'ClosedPayload',
    'ClosedPayloadError',
    'EmptyAlts',
    'EmptyAltsError',
    'InvalidCapacity',
    'InvalidCapacityError',
    'QueueOverflow',
    'QueueOverflowError',
    'TransformWithoutBuffer',
    'TransformWithoutBufferError',
    'UsageError',
]


class UsageError(Exception):
    """Base class for fatal misuse of the channel engine."""


# --- Construction Errors ---


class InvalidCapacity(msgspec.Struct, frozen=True, gc=False):
    """Ring or buffer requested with a non-positive size - struct variant."""

    capacity: int

    def to_exception(self) -> InvalidCapacityError:
        """Convert to exception for raise-based code."""
        return InvalidCapacityError(self.capacity)


class InvalidCapacityError(UsageError):
    """Ring or buffer requested with a non-positive size - exception variant."""

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Can't create a ring buffer of size {capacity}")

    def to_struct(self) -> InvalidCapacity:
        """Convert to struct for value-passing code."""
        return InvalidCapacity(self.capacity)


class TransformWithoutBuffer(msgspec.Struct, frozen=True, gc=False):
    """Transform given to an unbuffered channel - struct variant."""

    def to_exception(self) -> TransformWithoutBufferError:
        """Convert to exception for raise-based code."""
        return TransformWithoutBufferError()


class TransformWithoutBufferError(UsageError):
    """Transform given to an unbuffered channel - exception variant."""

    def __init__(self) -> None:
        super().__init__('Only buffered channels can use transforms')

    def to_struct(self) -> TransformWithoutBuffer:
        """Convert to struct for value-passing code."""
        return TransformWithoutBuffer()


# --- Channel Protocol Errors ---


class ClosedPayload(msgspec.Struct, frozen=True, gc=False):
    """The CLOSED marker was put on a channel - struct variant."""

    def to_exception(self) -> ClosedPayloadError:
        """Convert to exception for raise-based code."""
        return ClosedPayloadError()


class ClosedPayloadError(UsageError):
    """The CLOSED marker was put on a channel - exception variant."""

    def __init__(self) -> None:
        super().__init__('Cannot put CLOSED on a channel')

    def to_struct(self) -> ClosedPayload:
        """Convert to struct for value-passing code."""
        return ClosedPayload()


class QueueOverflow(msgspec.Struct, frozen=True, gc=False):
    """Too many pending operations on one side of a channel - struct variant."""

    side: str
    limit: int

    def to_exception(self) -> QueueOverflowError:
        """Convert to exception for raise-based code."""
        return QueueOverflowError(self.side, self.limit)


class QueueOverflowError(UsageError):
    """Too many pending operations on one side of a channel - exception variant.

    Raised when a producer or consumer keeps queueing blocking operations on a
    channel faster than the other side can serve them.
    """

    def __init__(self, side: str, limit: int) -> None:
        self.side = side
        self.limit = limit
        super().__init__(f'No more than {limit} pending {side} are allowed on a single channel')

    def to_struct(self) -> QueueOverflow:
        """Convert to struct for value-passing code."""
        return QueueOverflow(self.side, self.limit)


# --- Select Errors ---


class EmptyAlts(msgspec.Struct, frozen=True, gc=False):
    """alts called without operations - struct variant."""

    def to_exception(self) -> EmptyAltsError:
        """Convert to exception for raise-based code."""
        return EmptyAltsError()


class EmptyAltsError(UsageError):
    """alts called without operations - exception variant."""

    def __init__(self) -> None:
        super().__init__('Empty alt list')

    def to_struct(self) -> EmptyAlts:
        """Convert to struct for value-passing code."""
        return EmptyAlts()
