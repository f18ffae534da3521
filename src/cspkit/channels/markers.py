"""Marker values with engine meaning.

`None` is an ordinary payload; these markers are the only values the engine
interprets. They are members of an Enum so they pickle, compare by identity and
can be spelled in type hints as `Literal[Marker.CLOSED]`.
"""

from __future__ import annotations

from enum import Enum

__all__ = ['CLOSED', 'DEFAULT', 'NO_VALUE', 'Marker']


class Marker(Enum):
    """Distinguished non-payload values."""

    CLOSED = 'closed'
    NO_VALUE = 'no_value'
    DEFAULT = 'default'

    def __repr__(self) -> str:
        return self.name


# Delivered to takers of a closed channel. Never a legal payload.
CLOSED = Marker.CLOSED
# Returned by poll() when nothing is available; also "no default" for alts.
NO_VALUE = Marker.NO_VALUE
# Pseudo-channel reported by alts when its default branch wins.
DEFAULT = Marker.DEFAULT
