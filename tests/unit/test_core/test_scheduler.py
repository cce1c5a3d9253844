import threading

import pytest
from core.scheduler import ManualScheduler, ThreadedScheduler


@pytest.fixture
def scheduler():
    return ManualScheduler()


def test_calls_run_in_due_order(scheduler):
    ran = []
    scheduler.call_later(0.3, lambda: ran.append("c"))
    scheduler.call_later(0.1, lambda: ran.append("a"))
    scheduler.call_later(0.2, lambda: ran.append("b"))

    assert scheduler.advance(0.15) == 1
    assert ran == ["a"]
    scheduler.run_until_idle()
    assert ran == ["a", "b", "c"]


def test_equal_delays_keep_schedule_order(scheduler):
    ran = []
    for name in "xyz":
        scheduler.call_later(0.5, lambda name=name: ran.append(name))
    scheduler.advance(1)
    assert ran == ["x", "y", "z"]


def test_cancelled_call_never_runs(scheduler):
    ran = []
    call = scheduler.call_later(0.1, lambda: ran.append("x"))
    assert call.cancel() is True
    scheduler.run_until_idle()
    assert ran == []
    assert scheduler.pending_count == 0


def test_cancel_after_fire_returns_false(scheduler):
    call = scheduler.call_later(0.1, lambda: None)
    scheduler.advance(0.2)
    assert call.fired
    assert call.cancel() is False


def test_callbacks_can_schedule_more(scheduler):
    ran = []

    def first():
        ran.append("first")
        scheduler.call_later(0.1, lambda: ran.append("second"))

    scheduler.call_later(0.1, first)
    scheduler.advance(0.25)
    assert ran == ["first", "second"]


def test_failing_callback_does_not_stop_loop(scheduler):
    ran = []

    def boom():
        raise RuntimeError("boom")

    scheduler.call_later(0.1, boom)
    scheduler.call_later(0.2, lambda: ran.append("ok"))
    scheduler.run_until_idle()
    assert ran == ["ok"]


def test_shutdown_cancels_pending(scheduler):
    ran = []
    call = scheduler.call_later(0.1, lambda: ran.append("x"))
    scheduler.shutdown()
    scheduler.run_until_idle()
    assert ran == []
    assert call.cancelled
    with pytest.raises(RuntimeError):
        scheduler.call_later(0.1, lambda: None)


def test_clock_advances_even_when_idle(scheduler):
    scheduler.advance(2.0)
    assert scheduler.now() == 2.0


def test_threaded_scheduler_runs_calls():
    scheduler = ThreadedScheduler(name="test-scheduler")
    scheduler.start()
    done = threading.Event()
    order = []
    scheduler.call_later(0.02, lambda: order.append(2))
    scheduler.call_later(0.01, lambda: order.append(1))
    scheduler.call_later(0.03, done.set)
    try:
        assert done.wait(2.0)
        assert order == [1, 2]
    finally:
        scheduler.shutdown()


def test_threaded_shutdown_cancels_pending():
    scheduler = ThreadedScheduler(name="test-scheduler")
    scheduler.start()
    ran = []
    call = scheduler.call_later(10, lambda: ran.append("late"))
    scheduler.shutdown()
    assert call.cancelled
    assert ran == []
