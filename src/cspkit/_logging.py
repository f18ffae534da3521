"""Structured logging for the channel engine.

The engine logs sparingly and only at the points where something went wrong
or a runtime changed state. Event names are `<area>.<what>`:

    runtime.init / runtime.shutdown     lifecycle (debug)
    config.unknown_host                 CSPKIT_HOST fallback (warning)
    channel.queue_overflow              carries channel_id, side, limit
    channel.transform_error             carries channel_id, error
    process.failed                      carries process

While a process step runs, `process` is bound in structlog's contextvars, so
anything logged from inside a generator (by the engine or by user code via
`get_logger`) names the process it came from.

Nothing is configured until `configure_logging()` runs, directly or through
`cspkit.init(log_level=...)`. Output goes through structlog's
ProcessorFormatter, so a host application's stdlib records share the renderer.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'process_context',
    'remove_log_hook',
]

type LogHook = Callable[[dict[str, Any]], None]

_log_hooks: list[LogHook] = []


def _run_hooks(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for hook in tuple(_log_hooks):
        try:
            hook(event_dict.copy())
        except Exception:  # noqa: BLE001, S112
            continue  # a broken hook must not take the engine down with it
    return event_dict


def _pre_chain() -> list[Any]:
    """Processors shared by engine events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        _run_hooks,
    ]


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
) -> None:
    """Route engine events through stdlib logging on stderr.

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        json_output: Emit one JSON object per event. If False, use the
            console renderer (colored when stderr is a terminal).
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        # Transform and process failures log exc_info; JSON needs it as text.
        render: list[Any] = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger (a lazy proxy until logging is configured)."""
    return structlog.get_logger(name)


def process_context(name: str) -> Any:
    """Context manager binding `process=name` for events logged inside it."""
    return structlog.contextvars.bound_contextvars(process=name)


# --- Logging Hooks ---


def add_log_hook(hook: LogHook) -> None:
    """Register a hook called with a copy of every event dict.

    Hooks see events after context merging and before rendering, so they can
    count transform failures or assert on engine events in tests.
    """
    _log_hooks.append(hook)


def remove_log_hook(hook: LogHook) -> None:
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    _log_hooks.clear()
