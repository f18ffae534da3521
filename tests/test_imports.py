"""Tests for verifying the public import surface."""

import cspkit


class TestFlatImports:
    """Verify flat imports from cspkit work."""

    def test_channels(self) -> None:
        from cspkit import CLOSED, Channel, chan, dropping, fixed, promise, promise_chan, sliding

        assert isinstance(chan(fixed(1)), Channel)
        assert callable(dropping)
        assert callable(sliding)
        assert callable(promise)
        assert promise_chan().buf is not None
        assert repr(CLOSED) == 'CLOSED'

    def test_processes(self) -> None:
        """Instruction builders return their msgspec structs."""
        from cspkit import Alts, Put, Sleep, Take, alts, put, sleep, take

        ch = cspkit.chan()
        assert isinstance(take(ch), Take)
        assert isinstance(put(ch, 1), Put)
        assert isinstance(sleep(5), Sleep)
        assert isinstance(alts([ch]), Alts)

    def test_operations(self) -> None:
        from cspkit import from_iterable, into, merge, onto, pipe, reduce, split, take_n

        for fn in (from_iterable, into, merge, onto, pipe, reduce, split, take_n):
            assert callable(fn)

    def test_all_names_resolve(self) -> None:
        for name in cspkit.__all__:
            assert hasattr(cspkit, name), name
