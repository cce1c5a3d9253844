"""
Assistant Stub - scripted conversational assistant.

Each accepted user message is followed, after a fixed delay, by one reply
drawn uniformly at random from a fixed pool. The reply never depends on
what the user wrote.

Only one turn is in flight at a time: while a reply is being composed,
further submissions are refused (and the input buffer is kept), so the
transcript always alternates user → assistant.
"""

import itertools
import random
import threading
from enum import Enum
from typing import List, Optional
import logging

from core.models import ChatMessage, Sender
from core.scheduler import Scheduler, ScheduledCall
from core.settings import DashboardSettings

log = logging.getLogger(__name__)


class TurnState(Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class SubmitOutcome(Enum):
    ACCEPTED = "accepted"
    IGNORED_EMPTY = "ignored_empty"
    BUSY = "busy"


class AssistantStub:
    """
    Transcript plus a single-slot reply turn.

    Usage:
        assistant = AssistantStub(scheduler)
        assistant.submit("When should I irrigate?")   # ACCEPTED
        assistant.is_composing                        # True until the reply lands
    """

    def __init__(self, scheduler: Scheduler, settings: Optional[DashboardSettings] = None,
                 rng: Optional[random.Random] = None):
        self.scheduler = scheduler
        self.settings = settings or DashboardSettings()
        self.settings.validate()
        self.rng = rng or random.Random()

        self._lock = threading.RLock()
        self._messages: List[ChatMessage] = []
        self._ids = itertools.count(1)
        self._state = TurnState.IDLE
        self._pending: Optional[ScheduledCall] = None
        self.input_text = ""

    # ───────────────────────────────────────────────────────────────────────
    # State
    # ───────────────────────────────────────────────────────────────────────
    @property
    def state(self) -> TurnState:
        with self._lock:
            return self._state

    @property
    def is_composing(self) -> bool:
        return self.state == TurnState.AWAITING_REPLY

    @property
    def messages(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def set_input(self, text: str):
        self.input_text = text

    # ───────────────────────────────────────────────────────────────────────
    # Turns
    # ───────────────────────────────────────────────────────────────────────
    def submit(self, text: Optional[str] = None) -> SubmitOutcome:
        """
        Submit a user message (the input buffer if ``text`` is omitted).

        Returns:
            ACCEPTED, IGNORED_EMPTY for blank input, or BUSY while a reply is pending
        """
        if text is None:
            text = self.input_text

        if not text.strip():
            return SubmitOutcome.IGNORED_EMPTY

        with self._lock:
            if self._state == TurnState.AWAITING_REPLY:
                log.debug("Submission refused: reply still being composed")
                return SubmitOutcome.BUSY

            self._messages.append(ChatMessage(id=next(self._ids), sender=Sender.USER, text=text))
            self.input_text = ""
            self._state = TurnState.AWAITING_REPLY
            self._pending = self.scheduler.call_later(
                self.settings.reply_delay_seconds, self._reply, label="assistant_reply"
            )
        return SubmitOutcome.ACCEPTED

    def _reply(self):
        with self._lock:
            if self._state != TurnState.AWAITING_REPLY:
                return
            text = self.rng.choice(self.settings.response_pool)
            self._messages.append(ChatMessage(id=next(self._ids), sender=Sender.ASSISTANT, text=text))
            self._pending = None
            self._state = TurnState.IDLE
        log.debug("Assistant reply appended")

    def reset(self):
        """Start a new conversation, dropping any reply still pending."""
        with self._lock:
            self._cancel_pending()
            self._messages.clear()
            self._state = TurnState.IDLE
            self.input_text = ""

    def shutdown(self):
        with self._lock:
            self._cancel_pending()
            self._state = TurnState.IDLE

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
