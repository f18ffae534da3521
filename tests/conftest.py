"""Pytest configuration: a fresh manual-host runtime for every test."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

import cspkit
from cspkit import ManualHost, Runtime
from cspkit._logging import clear_log_hooks

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def runtime() -> Generator[Runtime]:
    """Install a ManualHost runtime so nothing runs until the test drives it.

    Shutting it down afterwards discards queued work and timers, so nothing
    leaks into the next test.
    """
    rt = cspkit.init(ManualHost())
    yield rt
    cspkit.shutdown()
    clear_log_hooks()


@pytest.fixture
def host(runtime: Runtime) -> ManualHost:
    """The manual host driving the current runtime."""
    assert isinstance(runtime.host, ManualHost)
    return runtime.host


class Recorder:
    """Callable that records every value it is called with."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, value: Any = None) -> None:
        self.calls.append(value)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_recorder() -> type[Recorder]:
    """Factory for tests that need several independent recorders."""
    return Recorder
