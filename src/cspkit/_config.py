"""Engine configuration: Host enum, EngineConfig, and resolution from arguments/env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from cspkit._logging import get_logger

__all__ = [
    'DEFAULT_RING_CAPACITY',
    'MAX_DIRTY',
    'MAX_QUEUE_SIZE',
    'TASK_BATCH_SIZE',
    'EngineConfig',
    'Host',
    'resolve_config',
]

# Pending operations on one side of a channel before inactive ones are swept.
MAX_DIRTY = 64
# Hard cap on pending operations per channel side.
MAX_QUEUE_SIZE = 1024
# Initial capacity of every ring (pending queues and the dispatcher queue).
DEFAULT_RING_CAPACITY = 32
# Continuations run per dispatcher tick.
TASK_BATCH_SIZE = 1024

logger = get_logger(__name__)


class Host(Enum):
    """Event source that drives dispatcher ticks and timers."""

    ASYNCIO = 'asyncio'
    MANUAL = 'manual'


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for a cspkit runtime.

    Attributes:
        host: Which host drives the dispatcher (ASYNCIO or MANUAL).
        max_dirty: Queued operations allowed before a dead-handler sweep.
        max_queue_size: Maximum pending puts (or takes) per channel.
        ring_capacity: Initial capacity of channel and dispatcher rings.
        batch_size: Continuations drained per dispatcher tick.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
    """

    host: Host = Host.ASYNCIO
    max_dirty: int = MAX_DIRTY
    max_queue_size: int = MAX_QUEUE_SIZE
    ring_capacity: int = DEFAULT_RING_CAPACITY
    batch_size: int = TASK_BATCH_SIZE
    log_level: str | None = None


def _detect_host() -> Host:
    """Detect the host from the CSPKIT_HOST environment variable.

    Defaults to ASYNCIO when unset or unrecognised.
    """
    env_host = os.environ.get('CSPKIT_HOST', '').lower()
    if not env_host:
        return Host.ASYNCIO
    try:
        return Host(env_host)
    except ValueError:
        logger.warning('config.unknown_host', value=env_host, fallback=Host.ASYNCIO.value)
        return Host.ASYNCIO


def _positive(name: str, value: int | None, default: int) -> int:
    if value is None:
        return default
    if value <= 0:
        msg = f'{name} must be a positive integer, got {value}'
        raise ValueError(msg)
    return value


def resolve_config(
    host: Host | str | None = None,
    *,
    max_dirty: int | None = None,
    max_queue_size: int | None = None,
    ring_capacity: int | None = None,
    batch_size: int | None = None,
    log_level: str | None = None,
) -> EngineConfig:
    """Build an EngineConfig, filling unset values from env and defaults.

    Args:
        host: Host enum or its string value ("asyncio", "manual"). Auto-detected if None.
        max_dirty: Dirty-sweep threshold. Defaults to MAX_DIRTY.
        max_queue_size: Pending operations cap. Defaults to MAX_QUEUE_SIZE.
        ring_capacity: Initial ring capacity. Defaults to DEFAULT_RING_CAPACITY.
        batch_size: Dispatcher batch size. Defaults to TASK_BATCH_SIZE.
        log_level: Logging level. None = leave logging unconfigured.

    Returns:
        The resolved EngineConfig.

    Raises:
        ValueError: If a numeric setting is not positive or the host name is unknown.
    """
    if host is None:
        resolved_host = _detect_host()
    elif isinstance(host, str):
        resolved_host = Host(host.lower())
    else:
        resolved_host = host

    return EngineConfig(
        host=resolved_host,
        max_dirty=_positive('max_dirty', max_dirty, MAX_DIRTY),
        max_queue_size=_positive('max_queue_size', max_queue_size, MAX_QUEUE_SIZE),
        ring_capacity=_positive('ring_capacity', ring_capacity, DEFAULT_RING_CAPACITY),
        batch_size=_positive('batch_size', batch_size, TASK_BATCH_SIZE),
        log_level=log_level,
    )
