"""
Data Ingestion Simulator

Models the dashboard's external data services as independently-latent
deliveries. At start-up every dataset kind is scheduled on the scheduler at
its own configured delay; notifications are delivered synchronously and do
not take part in readiness.

Each delivery calls the kind's source through a tenacity retry policy. A
source that still fails after the last attempt leaves its slot in the
terminal FAILED state, so the readiness gate can still resolve (as
READY_WITH_ERRORS) instead of waiting forever.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set

from tenacity import Retrying, stop_after_attempt, wait_exponential, before_sleep_log

from core.errors import DatasetFetchError, SettingsError
from core.notifications import NotificationCenter
from core.scheduler import Scheduler, ScheduledCall
from core.settings import DashboardSettings
from core.store import DatasetKind, DatasetStatus, DatasetStore

log = logging.getLogger(__name__)

Source = Callable[[], Any]


class IngestionSimulator:
    """
    Schedules one delivery per dataset kind and derives readiness.

    Usage:
        simulator = IngestionSimulator(store, notifications, scheduler, sources)
        simulator.start()
        ...
        simulator.shutdown()   # cancels deliveries still in flight
    """

    def __init__(
        self,
        store: DatasetStore,
        notifications: NotificationCenter,
        scheduler: Scheduler,
        sources: Dict[DatasetKind, Source],
        settings: Optional[DashboardSettings] = None,
    ):
        self.store = store
        self.notifications = notifications
        self.scheduler = scheduler
        self.sources = dict(sources)
        self.settings = settings or DashboardSettings()

        self._lock = threading.RLock()
        self._started = False
        self._pending: Dict[DatasetKind, ScheduledCall] = {}
        self._required: List[DatasetKind] = []
        self._superseded: Set[DatasetKind] = set()

        try:
            self.gate_kind = DatasetKind(self.settings.readiness_gate)
            self._delays = {DatasetKind(k): v for k, v in self.settings.arrival_delays.items()}
        except ValueError as e:
            raise SettingsError(f"Unknown dataset kind in settings: {e}") from e
        if DatasetKind.NOTIFICATIONS in self._delays:
            raise SettingsError("Notifications are delivered at start-up and cannot be delayed")
        if self.gate_kind not in self._delays or self.gate_kind not in self.sources:
            raise SettingsError(
                f"Readiness gate {self.gate_kind.value} needs both an arrival delay and a source"
            )

    # ═══════════════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════
    def start(self):
        """Deliver notifications now and schedule every other dataset."""
        with self._lock:
            if self._started:
                log.debug("Ingestion already started")
                return
            self._started = True

            self._deliver_notifications()

            for kind, delay in self._delays.items():
                if kind not in self.sources:
                    log.warning(f"No source for {kind.value}; it will not be scheduled")
                    continue
                if kind in self._superseded or self.store.status(kind) == DatasetStatus.ARRIVED:
                    log.info(f"{kind.value} already supplied; skipping simulated delivery")
                    continue
                self._required.append(kind)
                self._pending[kind] = self.scheduler.call_later(
                    delay, self._make_delivery(kind), label=f"deliver_{kind.value}"
                )
            log.info(f"Scheduled {len(self._pending)} dataset deliveries "
                     f"(gate: {self.gate_kind.value})")

        self._check_readiness()

    def shutdown(self):
        """Cancel every delivery that has not fired yet."""
        with self._lock:
            cancelled = [kind.value for kind, call in self._pending.items() if call.cancel()]
            self._pending.clear()
        if cancelled:
            log.info(f"Cancelled pending deliveries: {', '.join(cancelled)}")

    def cancel(self, kind: DatasetKind) -> bool:
        """
        Supersede the simulated delivery of ``kind`` and stop waiting on it.

        A delivery whose fetch is already running finishes but never writes.

        Returns:
            True if a delivery that had not fired yet was cancelled
        """
        with self._lock:
            self._superseded.add(kind)
            call = self._pending.pop(kind, None)
            cancelled = call is not None and call.cancel()
            released = kind in self._required
            if released:
                self._required.remove(kind)
        if cancelled:
            log.info(f"Cancelled pending {kind.value} delivery")
        if released:
            self._check_readiness()
        return cancelled

    @property
    def started(self) -> bool:
        return self._started

    @property
    def pending_kinds(self) -> List[DatasetKind]:
        with self._lock:
            return [kind for kind, call in self._pending.items() if call.pending]

    # ═══════════════════════════════════════════════════════════════════════
    # DELIVERY
    # ═══════════════════════════════════════════════════════════════════════
    def _retrying(self) -> Retrying:
        backoff = self.settings.retry_backoff_seconds
        return Retrying(
            stop=stop_after_attempt(self.settings.fetch_attempts),
            wait=wait_exponential(multiplier=backoff, min=0, max=max(backoff * 8, 0)),
            before_sleep=before_sleep_log(log, logging.WARNING),
            reraise=True,
        )

    def fetch(self, kind: DatasetKind) -> Any:
        """
        Call the source for ``kind`` with retries.

        Raises:
            DatasetFetchError: when every attempt failed
        """
        source = self.sources[kind]
        try:
            return self._retrying()(source)
        except Exception as e:
            raise DatasetFetchError(kind.value, str(e) or e.__class__.__name__) from e

    def _make_delivery(self, kind: DatasetKind) -> Callable[[], None]:
        def deliver():
            with self._lock:
                self._pending.pop(kind, None)
            try:
                error = None
                try:
                    value = self.fetch(kind)
                except DatasetFetchError as e:
                    error = str(e)
                # cancel() and this write are serialised by self._lock.
                with self._lock:
                    if kind in self._superseded:
                        log.info(f"Discarding {kind.value} delivery: superseded while fetching")
                        return
                    if error is None:
                        self.store.set(kind, value)
                    else:
                        self.store.fail(kind, error)
            finally:
                self._check_readiness()
        deliver.__name__ = f"deliver_{kind.value}"
        return deliver

    def _deliver_notifications(self):
        if DatasetKind.NOTIFICATIONS not in self.sources:
            return
        try:
            seed = self.fetch(DatasetKind.NOTIFICATIONS)
        except DatasetFetchError as e:
            self.notifications.mark_failed(str(e))
            return
        self.notifications.populate(seed)

    # ═══════════════════════════════════════════════════════════════════════
    # READINESS
    # ═══════════════════════════════════════════════════════════════════════
    def _check_readiness(self):
        """Open the gate once the gate kind and every other scheduled kind are terminal."""
        with self._lock:
            if not self._started:
                return
            required = list(self._required)

        if self.gate_kind in required and not self.store.is_terminal(self.gate_kind):
            return
        if any(not self.store.is_terminal(kind) for kind in required):
            return

        with_errors = any(self.store.status(kind) == DatasetStatus.FAILED for kind in required)
        self.store.mark_ready(with_errors=with_errors)
