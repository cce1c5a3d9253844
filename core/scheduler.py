"""
Scheduler - single-consumer event loop for delayed callbacks.

All simulated latency in the dashboard (dataset arrivals, assistant replies)
goes through a scheduler. Callbacks run one at a time, in due order, each to
completion before the next starts. Every scheduled call returns a
``ScheduledCall`` that can be cancelled until it fires.

Two implementations share the same queue:
- ThreadedScheduler: a daemon thread sleeping until the next due call
- ManualScheduler: a virtual clock advanced explicitly (tests, scripts)
"""

import heapq
import itertools
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional
import logging

log = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledCall:
    """A pending callback. Acts as its own cancellation token."""
    due: float
    seq: int
    label: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)
    lock: Any = field(default=None, compare=False, repr=False)

    def cancel(self) -> bool:
        """Cancel the call. Returns False if it already fired."""
        if self.lock is None:
            return self._mark_cancelled()
        with self.lock:
            return self._mark_cancelled()

    def _mark_cancelled(self) -> bool:
        if self.fired:
            return False
        self.cancelled = True
        return True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """
    Base scheduler holding the ordered queue of pending calls.

    Subclasses decide how time passes.
    """

    def __init__(self):
        self._queue: List[ScheduledCall] = []
        self._seq = itertools.count()
        self._lock = threading.RLock()
        self._cond = threading.Condition(self._lock)
        self._closed = False

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callable[[], None], label: str = "") -> ScheduledCall:
        """
        Schedule ``callback`` to run after ``delay`` seconds.

        Raises:
            RuntimeError: if the scheduler has been shut down
        """
        with self._cond:
            if self._closed:
                raise RuntimeError("Scheduler is shut down")
            call = ScheduledCall(
                due=self.now() + max(delay, 0.0),
                seq=next(self._seq),
                label=label or getattr(callback, "__name__", "call"),
                callback=callback,
                lock=self._lock,
            )
            heapq.heappush(self._queue, call)
            log.debug(f"Scheduled {call.label} in {delay:.3f}s")
            self._cond.notify_all()
            return call

    @property
    def pending_count(self) -> int:
        with self._cond:
            return sum(1 for call in self._queue if call.pending)

    def shutdown(self):
        """Cancel every pending call and refuse new ones."""
        with self._cond:
            self._closed = True
            cancelled = 0
            for call in self._queue:
                if call.cancel():
                    cancelled += 1
            self._queue.clear()
            self._cond.notify_all()
        if cancelled:
            log.info(f"Scheduler shut down, cancelled {cancelled} pending call(s)")

    @property
    def closed(self) -> bool:
        return self._closed

    def _pop_due(self, now: float) -> Optional[ScheduledCall]:
        """Pop the next live call due at or before ``now``."""
        with self._cond:
            while self._queue:
                head = self._queue[0]
                if not head.pending:
                    heapq.heappop(self._queue)
                    continue
                if head.due > now:
                    return None
                heapq.heappop(self._queue)
                head.fired = True
                return head
            return None

    def _next_due(self) -> Optional[float]:
        with self._cond:
            for call in sorted(self._queue):
                if call.pending:
                    return call.due
            return None

    def _run(self, call: ScheduledCall):
        try:
            call.callback()
        except Exception:
            log.exception(f"Scheduled call {call.label} raised")


class ManualScheduler(Scheduler):
    """
    Scheduler driven by a virtual clock.

    Nothing runs until ``advance`` or ``run_until_idle`` is called.
    Callbacks scheduled by callbacks are honoured within the same advance
    if they fall due before its end.
    """

    def __init__(self, start: float = 0.0):
        super().__init__()
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every call that falls due. Returns calls run."""
        target = self._now + seconds
        ran = 0
        while True:
            due = self._next_due()
            if due is None or due > target:
                break
            self._now = max(self._now, due)
            call = self._pop_due(self._now)
            if call is None:
                continue
            self._run(call)
            ran += 1
        self._now = target
        return ran

    def run_until_idle(self) -> int:
        """Run every pending call, advancing the clock as needed."""
        ran = 0
        while True:
            due = self._next_due()
            if due is None:
                return ran
            ran += self.advance(max(due - self._now, 0.0))


class ThreadedScheduler(Scheduler):
    """
    Scheduler backed by one daemon thread.

    Usage:
        scheduler = ThreadedScheduler()
        scheduler.start()
        scheduler.call_later(0.5, deliver_farm)
        ...
        scheduler.shutdown()
    """

    def __init__(self, name: str = "dashboard-scheduler"):
        super().__init__()
        self.name = name
        self._thread: Optional[threading.Thread] = None

    def now(self) -> float:
        return time.monotonic()

    def start(self):
        with self._cond:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
            self._thread.start()
            log.info(f"Scheduler thread {self.name} started")

    def shutdown(self, wait: bool = True, timeout: float = 2.0):
        super().shutdown()
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _loop(self):
        while True:
            with self._cond:
                if self._closed:
                    break
                due = self._next_due()
                if due is None:
                    self._cond.wait()
                    continue
                delay = due - self.now()
                if delay > 0:
                    self._cond.wait(delay)
                    continue
                call = self._pop_due(self.now())
            # Callbacks run without the queue lock held.
            if call is not None:
                self._run(call)
        log.info(f"Scheduler thread {self.name} stopped")
