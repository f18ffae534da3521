"""Tests for alts: exclusive choice over several channel operations."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from cspkit import CLOSED, DEFAULT, AltResult, alts, chan, do_alts, go, offer, take_then_callback, timeout
from cspkit.errors import EmptyAltsError


class TestDoAlts:
    """Tests for the callback form."""

    def test_empty_operations_raise(self, recorder) -> None:
        with pytest.raises(EmptyAltsError, match='Empty alt list'):
            do_alts([], recorder)

    def test_exactly_one_operation_commits(self, recorder) -> None:
        a, b = chan(1), chan(1)
        offer(a, 'a')
        offer(b, 'b')

        do_alts([a, b], recorder)

        assert len(recorder.calls) == 1
        winner = recorder.calls[0]
        assert isinstance(winner, AltResult)
        loser = b if winner.channel is a else a
        assert loser.buf.count() == 1

    def test_priority_prefers_first_ready(self, recorder) -> None:
        a, b = chan(1), chan(1)
        offer(a, 'a')
        offer(b, 'b')
        do_alts([a, b], recorder, priority=True)
        assert recorder.calls == [AltResult('a', a)]

    def test_put_operation(self, host, make_recorder) -> None:
        ch = chan()
        taken, chosen = make_recorder(), make_recorder()
        take_then_callback(ch, taken)

        do_alts([(ch, 'v')], chosen)

        assert chosen.calls == [AltResult(True, ch)]
        host.run_until_idle()
        assert taken.calls == ['v']

    def test_default_when_nothing_ready(self, recorder) -> None:
        a = chan()
        do_alts([a], recorder, default='fallback')
        assert recorder.calls == [AltResult('fallback', DEFAULT)]
        # The registered take is dead, so nothing can hand it a value.
        assert not offer(a, 'late')

    def test_default_ignored_when_operation_ready(self, recorder) -> None:
        a = chan(1)
        offer(a, 'ready')
        do_alts([a], recorder, default='fallback')
        assert recorder.calls == [AltResult('ready', a)]

    def test_pending_race_first_completion_wins(self, host, recorder) -> None:
        a, b = chan(), chan()
        do_alts([a, b], recorder)
        assert recorder.calls == []

        assert offer(b, 'from b')
        assert not offer(a, 'from a')
        host.run_until_idle()

        assert recorder.calls == [AltResult('from b', b)]

    def test_closed_channel_wins_with_closed(self, recorder) -> None:
        a = chan()
        a.close()
        do_alts([a], recorder)
        assert recorder.calls == [AltResult(CLOSED, a)]


class TestAltsFairness:
    """Tests for random ordering without priority."""

    def test_ready_channels_share_wins(self, make_recorder) -> None:
        random.seed(20240611)
        wins: Counter[str] = Counter()

        for _ in range(400):
            a, b = chan(1), chan(1)
            offer(a, 'a')
            offer(b, 'b')
            recorder = make_recorder()
            do_alts([a, b], recorder)
            wins[recorder.calls[0].value] += 1

        assert wins['a'] + wins['b'] == 400
        assert wins['a'] > 120
        assert wins['b'] > 120


class TestAltsInstruction:
    """Tests for alts yielded from a process."""

    def test_timeout_wins_over_silent_channel(self, host, recorder) -> None:
        never = chan()

        def proc():
            deadline = timeout(50)
            value, ch = yield alts([never, deadline])
            recorder((value, ch is deadline))

        go(proc)
        host.advance(49)
        assert recorder.calls == []
        host.advance(1)
        assert recorder.calls == [(CLOSED, True)]

    def test_default_from_process(self, host, recorder) -> None:
        def proc():
            result = yield alts([chan()], default='idle')
            recorder(result)

        go(proc)
        host.run_until_idle()
        assert recorder.calls == [AltResult('idle', DEFAULT)]

    def test_instruction_fields(self) -> None:
        ch = chan()
        instruction = alts([ch, (ch, 1)], priority=True)
        assert instruction.operations == (ch, (ch, 1))
        assert instruction.priority is True
