"""Tests for the batched dispatcher."""

from __future__ import annotations

import pytest

from cspkit import Dispatcher, ManualHost


@pytest.fixture
def manual() -> ManualHost:
    return ManualHost()


class TestDispatcherQueue:
    """Tests for queueing and tick arming."""

    def test_runs_nothing_in_line(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual)
        dispatcher.run(lambda: recorder('a'))
        assert recorder.calls == []
        assert dispatcher.pending == 1

    def test_arms_a_single_tick(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual)
        for i in range(3):
            dispatcher.run(lambda i=i: recorder(i))
        assert manual.pending_ticks == 1

        assert manual.run_until_idle() == 1
        assert recorder.calls == [0, 1, 2]
        assert dispatcher.pending == 0

    def test_work_queued_during_drain_runs_in_same_batch(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual)

        def first() -> None:
            recorder('first')
            dispatcher.run(lambda: recorder('second'))

        dispatcher.run(first)
        assert manual.run_until_idle() == 1
        assert recorder.calls == ['first', 'second']

    def test_batch_size_splits_ticks(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual, batch_size=2)
        for i in range(5):
            dispatcher.run(lambda i=i: recorder(i))

        assert manual.run_until_idle() == 3
        assert recorder.calls == [0, 1, 2, 3, 4]

    def test_failure_propagates_and_rearms(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual)

        def boom() -> None:
            raise ValueError('boom')

        dispatcher.run(boom)
        dispatcher.run(lambda: recorder('after'))

        with pytest.raises(ValueError, match='boom'):
            manual.run_until_idle()
        assert manual.pending_ticks == 1

        manual.run_until_idle()
        assert recorder.calls == ['after']


class TestDispatcherTimers:
    """Tests for delayed work."""

    def test_queue_delay_uses_host_clock(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual)
        dispatcher.queue_delay(lambda: recorder('late'), 10)
        manual.advance(9)
        assert recorder.calls == []
        manual.advance(1)
        assert recorder.calls == ['late']


class TestDispatcherShutdown:
    """Tests for shutdown()."""

    def test_shutdown_discards_and_refuses(self, manual, recorder) -> None:
        dispatcher = Dispatcher(manual)
        dispatcher.run(lambda: recorder('never'))
        dispatcher.queue_delay(lambda: recorder('never'), 5)

        dispatcher.shutdown()

        assert dispatcher.pending == 0
        assert manual.pending_timers == 0
        manual.advance(10)
        assert recorder.calls == []
        with pytest.raises(RuntimeError, match='shut down'):
            dispatcher.run(lambda: None)
        with pytest.raises(RuntimeError, match='shut down'):
            dispatcher.queue_delay(lambda: None, 1)

    def test_host_property(self, manual) -> None:
        assert Dispatcher(manual).host is manual
