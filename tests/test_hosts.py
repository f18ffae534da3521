"""Tests for dispatcher hosts."""

from __future__ import annotations

import asyncio

import pytest

from cspkit import AsyncioHost, ManualHost
from cspkit._hosts import DispatchHost, TimerHandle


class TestManualHost:
    """Tests for the virtual-clock host."""

    def test_satisfies_protocol(self) -> None:
        host = ManualHost()
        assert isinstance(host, DispatchHost)
        assert isinstance(host.call_later(1, lambda: None), TimerHandle)

    def test_ticks_run_only_when_driven(self, recorder) -> None:
        host = ManualHost()
        host.call_soon(lambda: recorder('tick'))
        assert host.pending_ticks == 1
        assert recorder.calls == []
        assert host.run_until_idle() == 1
        assert recorder.calls == ['tick']

    def test_run_until_idle_includes_nested_ticks(self, recorder) -> None:
        host = ManualHost()
        host.call_soon(lambda: host.call_soon(lambda: recorder('nested')))
        assert host.run_until_idle() == 2
        assert recorder.calls == ['nested']

    def test_timers_fire_in_deadline_then_insertion_order(self, recorder) -> None:
        host = ManualHost()
        host.call_later(20, lambda: recorder('b'))
        host.call_later(10, lambda: recorder('a'))
        host.call_later(20, lambda: recorder('c'))

        host.advance(15)
        assert recorder.calls == ['a']
        assert host.now == 15
        host.advance(5)
        assert recorder.calls == ['a', 'b', 'c']

    def test_clock_reads_deadline_inside_timer(self) -> None:
        host = ManualHost()
        seen: list[float] = []
        host.call_later(30, lambda: seen.append(host.now))
        host.advance(100)
        assert seen == [30]
        assert host.now == 100

    def test_ticks_from_timer_drained_before_next_timer(self, recorder) -> None:
        host = ManualHost()
        host.call_later(1, lambda: host.call_soon(lambda: recorder('tick')))
        host.call_later(2, lambda: recorder('timer'))
        host.advance(2)
        assert recorder.calls == ['tick', 'timer']

    def test_cancelled_timer_skipped(self, recorder) -> None:
        host = ManualHost()
        handle = host.call_later(5, lambda: recorder('x'))
        handle.cancel()
        assert host.pending_timers == 0
        host.advance(10)
        assert recorder.calls == []

    def test_negative_delay_fires_now(self, recorder) -> None:
        host = ManualHost()
        host.call_later(-5, lambda: recorder('now'))
        host.advance(0)
        assert recorder.calls == ['now']

    def test_close_drops_everything(self, recorder) -> None:
        host = ManualHost()
        host.call_soon(lambda: recorder('tick'))
        host.call_later(1, lambda: recorder('timer'))
        host.close()
        host.advance(5)
        assert recorder.calls == []


class TestAsyncioHost:
    """Tests for the asyncio-backed host."""

    def test_requires_running_loop(self) -> None:
        host = AsyncioHost()
        with pytest.raises(RuntimeError, match='running event loop'):
            host.call_soon(lambda: None)

    async def test_call_soon_runs_on_next_turn(self, recorder) -> None:
        host = AsyncioHost()
        host.call_soon(lambda: recorder('soon'))
        assert recorder.calls == []
        await asyncio.sleep(0)
        assert recorder.calls == ['soon']

    async def test_call_later_uses_milliseconds(self, recorder) -> None:
        host = AsyncioHost()
        host.call_later(10, lambda: recorder('later'))
        await asyncio.sleep(0)
        assert recorder.calls == []
        await asyncio.sleep(0.05)
        assert recorder.calls == ['later']

    async def test_close_cancels_timers_and_ignores_ticks(self, recorder) -> None:
        host = AsyncioHost(asyncio.get_running_loop())
        host.call_later(5, lambda: recorder('timer'))
        host.close()
        host.call_soon(lambda: recorder('tick'))
        await asyncio.sleep(0.02)
        assert recorder.calls == []
