"""
Dataset Store - latest value of every independently-arriving dataset.

Each dataset kind has one slot that is in exactly one of three states:
absent (nothing delivered yet), arrived (holds the delivered value as-is),
or failed (the source gave up). Writes overwrite; nothing is merged or
validated. The store also carries the global readiness flag, which leaves
LOADING once and never goes back.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

log = logging.getLogger(__name__)


class DatasetKind(Enum):
    """Independently-arriving data categories."""
    FARM = "farm"
    NDVI = "ndvi"
    SOIL = "soil"
    WEATHER = "weather"
    MARKET = "market"
    CROP_HEALTH = "crop_health"
    NOTIFICATIONS = "notifications"


class DatasetStatus(Enum):
    ABSENT = "absent"
    ARRIVED = "arrived"
    FAILED = "failed"


class Readiness(Enum):
    """Global loading indicator state."""
    LOADING = "loading"
    READY = "ready"
    READY_WITH_ERRORS = "ready_with_errors"


class _Absent:
    """Sentinel type for a dataset that has not arrived."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"


ABSENT = _Absent()


@dataclass
class _Slot:
    status: DatasetStatus = DatasetStatus.ABSENT
    value: Any = ABSENT
    error: Optional[str] = None
    writes: int = 0


Listener = Callable[[DatasetKind, Any], None]


class DatasetStore:
    """
    Thread-safe holder of dataset values and the readiness flag.

    Usage:
        store = DatasetStore()
        store.get(DatasetKind.NDVI)            # ABSENT
        store.set(DatasetKind.NDVI, samples)
        store.get(DatasetKind.NDVI) is samples # True
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._slots: Dict[DatasetKind, _Slot] = {kind: _Slot() for kind in DatasetKind}
        self._readiness = Readiness.LOADING
        self._listeners: List[Listener] = []

    # ───────────────────────────────────────────────────────────────────────
    # Slots
    # ───────────────────────────────────────────────────────────────────────
    def set(self, kind: DatasetKind, value: Any):
        """Overwrite the slot for ``kind``. Always succeeds; listener errors are logged."""
        with self._lock:
            slot = self._slots[kind]
            slot.status = DatasetStatus.ARRIVED
            slot.value = value
            slot.error = None
            slot.writes += 1
            listeners = list(self._listeners)
        log.debug(f"Dataset {kind.value} arrived")
        for listener in listeners:
            try:
                listener(kind, value)
            except Exception:
                log.exception(f"Listener for {kind.value} raised")

    def get(self, kind: DatasetKind) -> Any:
        """Current value, or ABSENT if nothing has arrived (including after a failure)."""
        with self._lock:
            return self._slots[kind].value

    def fail(self, kind: DatasetKind, error: str):
        """Record a terminal failure for a slot that has no value."""
        with self._lock:
            slot = self._slots[kind]
            if slot.status == DatasetStatus.ARRIVED:
                log.warning(f"Ignoring failure for {kind.value}: a value already arrived")
                return
            slot.status = DatasetStatus.FAILED
            slot.error = error
        log.error(f"Dataset {kind.value} failed: {error}")

    def entry(self, kind: DatasetKind) -> Tuple[DatasetStatus, Any, Optional[str]]:
        """Status, value and error of one slot, read together."""
        with self._lock:
            slot = self._slots[kind]
            return slot.status, slot.value, slot.error

    def status(self, kind: DatasetKind) -> DatasetStatus:
        with self._lock:
            return self._slots[kind].status

    def error(self, kind: DatasetKind) -> Optional[str]:
        with self._lock:
            return self._slots[kind].error

    def write_count(self, kind: DatasetKind) -> int:
        with self._lock:
            return self._slots[kind].writes

    def is_terminal(self, kind: DatasetKind) -> bool:
        return self.status(kind) != DatasetStatus.ABSENT

    def updater(self, kind: DatasetKind) -> Callable[[Any], None]:
        """A write capability limited to one dataset kind."""
        def update(value: Any):
            self.set(kind, value)
        update.__name__ = f"update_{kind.value}"
        return update

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call ``listener(kind, value)`` after every write.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def snapshot(self) -> Dict[DatasetKind, DatasetStatus]:
        with self._lock:
            return {kind: slot.status for kind, slot in self._slots.items()}

    # ───────────────────────────────────────────────────────────────────────
    # Readiness
    # ───────────────────────────────────────────────────────────────────────
    @property
    def readiness(self) -> Readiness:
        with self._lock:
            return self._readiness

    @property
    def is_loading(self) -> bool:
        return self.readiness == Readiness.LOADING

    def mark_ready(self, with_errors: bool = False) -> bool:
        """
        Leave the LOADING state. Only the first call has any effect.

        Returns:
            True if this call changed the readiness
        """
        with self._lock:
            if self._readiness != Readiness.LOADING:
                return False
            self._readiness = Readiness.READY_WITH_ERRORS if with_errors else Readiness.READY
            readiness = self._readiness
        log.info(f"Dashboard readiness: {readiness.value}")
        return True
