"""
Notification Center - ordered alerts with read/unread state.
"""

import threading
from dataclasses import replace
from typing import Iterable, List, Optional
import logging

from core.models import Notification
from core.store import DatasetStatus

log = logging.getLogger(__name__)


class NotificationCenter:
    """
    Owns the notification list shown in the header bell.

    The list is kept in delivery order (newest first by convention). Only
    ``acknowledge`` and ``acknowledge_all`` change read flags.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._items: List[Notification] = []
        self._status = DatasetStatus.ABSENT
        self._error: Optional[str] = None

    def populate(self, seed: Iterable[Notification]):
        """Replace the whole list."""
        with self._lock:
            self._items = [replace(n) for n in seed]
            self._status = DatasetStatus.ARRIVED
            self._error = None
            count = len(self._items)
        log.info(f"Loaded {count} notification(s)")

    def mark_failed(self, error: str):
        """Record that the notification source gave up. Keeps any earlier list."""
        with self._lock:
            if self._status == DatasetStatus.ARRIVED:
                return
            self._status = DatasetStatus.FAILED
            self._error = error
        log.error(f"Notifications unavailable: {error}")

    @property
    def status(self) -> DatasetStatus:
        return self._status

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def notifications(self) -> List[Notification]:
        """Copies of the current notifications, in order."""
        with self._lock:
            return [replace(n) for n in self._items]

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._items if not n.read)

    def acknowledge(self, notification_id: int) -> bool:
        """
        Mark one notification as read.

        Returns:
            True if an unread notification with this id was found
        """
        with self._lock:
            for item in self._items:
                if item.id == notification_id:
                    if item.read:
                        return False
                    item.read = True
                    return True
        log.debug(f"acknowledge: no notification with id {notification_id}")
        return False

    def acknowledge_all(self) -> int:
        """Mark everything as read. Returns how many changed."""
        with self._lock:
            changed = 0
            for item in self._items:
                if not item.read:
                    item.read = True
                    changed += 1
            return changed
