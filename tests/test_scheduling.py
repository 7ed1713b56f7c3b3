"""Tests for the manual scheduler used to drive sessions deterministically."""

import pytest

from khojney.core.scheduling import ManualScheduler


def test_callbacks_fire_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(2, lambda: fired.append(("b", scheduler.now())))
    scheduler.call_later(1, lambda: fired.append(("a", scheduler.now())))
    scheduler.call_later(5, lambda: fired.append(("c", scheduler.now())))

    scheduler.advance(3)

    assert fired == [("a", 1), ("b", 2)]
    assert scheduler.now() == 3
    assert scheduler.pending_count() == 1


def test_cancelled_call_never_fires():
    scheduler = ManualScheduler()
    fired = []
    call = scheduler.call_later(1, lambda: fired.append("x"))
    call.cancel()
    scheduler.advance(10)
    assert fired == []
    assert not call.active


def test_callbacks_scheduled_while_advancing_run_if_due():
    scheduler = ManualScheduler()
    fired = []

    def first():
        fired.append("first")
        scheduler.call_later(1, lambda: fired.append("second"))

    scheduler.call_later(1, first)
    scheduler.advance(2)
    assert fired == ["first", "second"]


def test_rejects_negative_values():
    scheduler = ManualScheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-0.5)


def test_call_is_inactive_once_fired():
    scheduler = ManualScheduler()
    call = scheduler.call_later(1, lambda: None)
    assert call.active
    scheduler.advance(1)
    assert not call.active
