"""Tests for handlers and boxes."""

from __future__ import annotations

from cspkit.channels.handlers import AltHandler, Box, FnHandler, PutBox
from cspkit.channels.protocols import Handler


class TestFnHandler:
    """Tests for FnHandler."""

    def test_always_active(self, recorder) -> None:
        handler = FnHandler(True, recorder)
        assert handler.is_active()
        handler.commit()
        assert handler.is_active()

    def test_blockable_flag(self) -> None:
        assert FnHandler(True).is_blockable()
        assert not FnHandler(False).is_blockable()

    def test_commit_returns_callback(self, recorder) -> None:
        handler = FnHandler(True, recorder)
        handler.commit()('v')
        assert recorder.calls == ['v']

    def test_missing_callback_is_noop(self) -> None:
        assert FnHandler(False).commit()('ignored') is None

    def test_satisfies_protocol(self) -> None:
        assert isinstance(FnHandler(True), Handler)


class TestAltHandler:
    """Tests for AltHandler exclusivity."""

    def test_commit_deactivates_siblings(self, make_recorder) -> None:
        flag = Box(True)
        first = AltHandler(flag, make_recorder())
        second = AltHandler(flag, make_recorder())
        assert first.is_active() and second.is_active()

        first.commit()

        assert not first.is_active()
        assert not second.is_active()

    def test_always_blockable(self, recorder) -> None:
        assert AltHandler(Box(True), recorder).is_blockable()

    def test_satisfies_protocol(self, recorder) -> None:
        assert isinstance(AltHandler(Box(True), recorder), Handler)


class TestBoxes:
    """Tests for Box and PutBox."""

    def test_box_is_mutable(self) -> None:
        box = Box(1)
        box.value = 2
        assert box.value == 2
        assert repr(box) == 'Box(2)'

    def test_putbox_holds_handler_and_value(self) -> None:
        handler = FnHandler(True)
        put_box = PutBox(handler, None)
        assert put_box.handler is handler
        assert put_box.value is None
