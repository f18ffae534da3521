"""Tests for awaiting channel operations from async code."""

from __future__ import annotations

import asyncio
from typing import Any

import anyio
import pytest

import cspkit
from cspkit import (
    CLOSED,
    NO_VALUE,
    chan,
    go,
    join,
    offer,
    poll,
    put,
    put_async,
    sleep,
    take,
    take_async,
    take_then_callback,
)


@pytest.fixture
def asyncio_runtime(runtime):
    """Swap the manual runtime for one driven by the running event loop."""
    return cspkit.init('asyncio')


class TestTakeAsync:
    """Tests for take_async()."""

    async def test_ready_value_returns_immediately(self, asyncio_runtime) -> None:
        ch = chan(1)
        offer(ch, 'v')
        assert await take_async(ch) == 'v'

    async def test_waits_for_producer(self, asyncio_runtime) -> None:
        ch = chan()

        def producer():
            yield sleep(5)
            yield put(ch, 'late')

        go(producer)
        assert await take_async(ch) == 'late'

    async def test_closed_channel(self, asyncio_runtime) -> None:
        ch = chan()
        ch.close()
        assert await take_async(ch) is CLOSED

    async def test_cancelled_take_is_withdrawn(self, asyncio_runtime) -> None:
        ch = chan()
        with anyio.move_on_after(0.01):
            await take_async(ch)
        assert not offer(ch, 'nobody home')

    async def test_cancel_after_commit_keeps_value(self, asyncio_runtime) -> None:
        """A take that already committed returns its value even when cancelled."""
        ch = chan()
        task = asyncio.create_task(take_async(ch))
        await asyncio.sleep(0)

        assert offer(ch, 'precious')
        task.cancel()

        assert await task == 'precious'
        assert poll(ch) is NO_VALUE


class TestPutAsync:
    """Tests for put_async()."""

    async def test_delivered_to_process(self, asyncio_runtime) -> None:
        ch = chan()

        def consumer():
            return (yield take(ch))

        got = go(consumer)
        assert await put_async(ch, 'v') is True
        assert await take_async(got) == 'v'

    async def test_closed_before_delivery(self, asyncio_runtime) -> None:
        ch = chan()

        def closer():
            yield sleep(5)
            ch.close()

        go(closer)
        assert await put_async(ch, 'v') is False

    async def test_cancel_after_commit_reports_delivery(self, asyncio_runtime) -> None:
        ch = chan()
        task = asyncio.create_task(put_async(ch, 'v'))
        await asyncio.sleep(0)

        received: list[Any] = []
        take_then_callback(ch, received.append)
        task.cancel()

        assert await task is True
        assert received == ['v']


class TestJoinAndRun:
    """Tests for join() and run()."""

    async def test_join_returns_process_value(self, asyncio_runtime) -> None:
        def proc():
            yield sleep(1)
            return 'done'

        assert await join(proc()) == 'done'

    async def test_join_returns_none(self, asyncio_runtime) -> None:
        def proc():
            yield sleep(1)

        assert await join(proc()) is None

    async def test_join_reraises_failure(self, asyncio_runtime) -> None:
        def proc():
            yield sleep(1)
            raise ValueError('boom')

        with pytest.raises(ValueError, match='boom'):
            await join(proc())

    def test_run_reraises_failure(self) -> None:
        def main():
            yield sleep(1)
            raise ValueError('boom')

        with pytest.raises(ValueError, match='boom'):
            cspkit.run(main)

    def test_run_drives_main_to_completion(self) -> None:
        def producer(ch):
            for n in range(3):
                yield put(ch, n)
            ch.close()

        def main(scale):
            ch = chan()
            go(producer, ch)
            seen = []
            while (value := (yield take(ch))) is not CLOSED:
                seen.append(value * scale)
            return seen

        assert cspkit.run(main, 10) == [0, 10, 20]

    def test_run_uninstalls_runtime(self) -> None:
        def main():
            yield sleep(0)
            return 1

        assert cspkit.run(main) == 1
        with pytest.raises(RuntimeError, match='not initialized'):
            cspkit.get_runtime()
