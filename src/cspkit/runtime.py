"""Runtime: owns the host and dispatcher for one program (or one test).

Channels and processes never hold a dispatcher themselves; they schedule
through the current runtime. Creating a fresh runtime per test keeps queued
work and timers from leaking between tests.
"""

from __future__ import annotations

from types import TracebackType
from typing import TYPE_CHECKING, Any

from cspkit._config import EngineConfig, Host, resolve_config
from cspkit._hosts import DispatchHost
from cspkit._hosts.loop import AsyncioHost
from cspkit._hosts.manual import ManualHost
from cspkit._logging import configure_logging, get_logger
from cspkit.dispatch import Dispatcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from cspkit._hosts import TimerHandle

__all__ = [
    'Runtime',
    'current_config',
    'current_dispatcher',
    'get_runtime',
    'init',
    'queue_delay',
    'schedule',
    'shutdown',
]

logger = get_logger(__name__)


class Runtime:
    """A host plus the dispatcher it drives.

    Example:
        ```python
        with cspkit.init(host='manual') as rt:
            ch = chan(1)
            offer(ch, 'x')
            rt.host.run_until_idle()
        ```
    """

    __slots__ = ('_closed', 'config', 'dispatcher', 'host')

    def __init__(self, config: EngineConfig, host: DispatchHost | None = None) -> None:
        """Create a runtime.

        Args:
            config: Engine configuration.
            host: Host instance to use instead of the one named by `config.host`.
        """
        self.config = config
        self.host: DispatchHost = host if host is not None else _create_host(config.host)
        self.dispatcher = Dispatcher(
            self.host,
            batch_size=config.batch_size,
            ring_capacity=config.ring_capacity,
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def shutdown(self) -> None:
        """Stop the dispatcher and host. Idempotent."""
        if self._closed:
            return
        self._closed = True
        pending = self.dispatcher.pending
        self.dispatcher.shutdown()
        logger.debug('runtime.shutdown', discarded=pending)

    def __enter__(self) -> Runtime:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if _runtime is self:
            shutdown()
        else:
            self.shutdown()


def _create_host(host: Host) -> DispatchHost:
    if host == Host.MANUAL:
        return ManualHost()
    return AsyncioHost()


# Current runtime (set by init())
_runtime: Runtime | None = None


def init(
    host: Host | str | DispatchHost | None = None,
    *,
    max_dirty: int | None = None,
    max_queue_size: int | None = None,
    ring_capacity: int | None = None,
    batch_size: int | None = None,
    log_level: str | None = None,
) -> Runtime:
    """Create and install the current runtime.

    A previously installed runtime is shut down first.

    Args:
        host: Host enum, its string value ("asyncio", "manual") or a host
            instance. Auto-detected from CSPKIT_HOST if None.
        max_dirty: Dirty-sweep threshold for new channels.
        max_queue_size: Pending-operation cap for new channels.
        ring_capacity: Initial ring capacity for new channels and the dispatcher.
        batch_size: Continuations run per dispatcher tick.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave logging alone.

    Returns:
        The installed Runtime.

    Example:
        ```python
        import cspkit

        rt = cspkit.init('manual')
        ch = cspkit.chan()
        ...
        cspkit.shutdown()
        ```
    """
    global _runtime  # noqa: PLW0603

    host_instance: DispatchHost | None = None
    if host is not None and not isinstance(host, (Host, str)):
        host_instance = host
        host = Host.MANUAL if isinstance(host, ManualHost) else Host.ASYNCIO

    config = resolve_config(
        host,
        max_dirty=max_dirty,
        max_queue_size=max_queue_size,
        ring_capacity=ring_capacity,
        batch_size=batch_size,
        log_level=log_level,
    )

    if log_level is not None:
        configure_logging(log_level)

    if _runtime is not None:
        _runtime.shutdown()

    _runtime = Runtime(config, host_instance)
    logger.debug('runtime.init', host=config.host.value, batch_size=config.batch_size)
    return _runtime


def get_runtime() -> Runtime:
    """Get the current runtime.

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _runtime is None:
        msg = 'Runtime not initialized. Call cspkit.init() first.'
        raise RuntimeError(msg)
    return _runtime


def shutdown() -> None:
    """Shut down and uninstall the current runtime, if any."""
    global _runtime  # noqa: PLW0603

    if _runtime is not None:
        _runtime.shutdown()
        _runtime = None


def current_config() -> EngineConfig | None:
    """Config of the current runtime, or None when no runtime is installed."""
    return _runtime.config if _runtime is not None else None


def current_dispatcher() -> Dispatcher:
    return get_runtime().dispatcher


def schedule(fn: Callable[[Any], object], value: Any) -> None:
    """Queue `fn(value)` on the current dispatcher."""
    current_dispatcher().run(lambda: fn(value))


def queue_delay(fn: Callable[[], object], msecs: float) -> TimerHandle:
    """Run `fn()` after `msecs` milliseconds on the current host."""
    return current_dispatcher().queue_delay(fn, msecs)
