"""
Dashboard Session

The owned application state for one dashboard viewer. It wires the dataset
store, notification center, ingestion simulator, viewport synchronizer and
assistant together, and is the only thing the UI holds on to.
"""

import random
from typing import Any, Callable, Dict, MutableMapping, Optional, Union
import logging

from core.analytics import DashboardView, build_dashboard_view
from core.assistant import AssistantStub
from core.errors import RegistrationError
from core.ingestion import IngestionSimulator, Source
from core.models import Farm
from core.notifications import NotificationCenter
from core.sample_data import default_sources
from core.scheduler import Scheduler, ThreadedScheduler
from core.settings import DashboardSettings, load_settings
from core.store import ABSENT, DatasetKind, DatasetStore
from core.viewport import BoundingBox, ViewportSynchronizer

log = logging.getLogger(__name__)

SESSION_KEY = "dashboard_session"


class DashboardSession:
    """
    All state behind one dashboard.

    Components only get the slice they need: the simulator writes through
    the store, the synchronizer listens to farm writes, the assistant and
    notification center own their own lists.
    """

    def __init__(
        self,
        settings: Optional[DashboardSettings] = None,
        scheduler: Optional[Scheduler] = None,
        sources: Optional[Dict[DatasetKind, Source]] = None,
        rng: Optional[random.Random] = None,
        on_fit: Optional[Callable[[BoundingBox], None]] = None,
    ):
        self.settings = settings or DashboardSettings()
        self.settings.validate()
        self.scheduler = scheduler or ThreadedScheduler()
        self.store = DatasetStore()
        self.notifications = NotificationCenter()
        self.viewport = ViewportSynchronizer(self.store, on_fit=on_fit)
        self.simulator = IngestionSimulator(
            self.store,
            self.notifications,
            self.scheduler,
            sources if sources is not None else default_sources(),
            self.settings,
        )
        self.assistant = AssistantStub(self.scheduler, self.settings, rng=rng)
        self._update_farm = self.store.updater(DatasetKind.FARM)

    def start(self):
        """Start the scheduler (if threaded) and kick off ingestion."""
        if isinstance(self.scheduler, ThreadedScheduler):
            self.scheduler.start()
        self.simulator.start()

    def shutdown(self):
        """Cancel everything in flight. The session cannot be restarted."""
        self.simulator.shutdown()
        self.assistant.shutdown()
        self.viewport.close()
        self.scheduler.shutdown()
        log.info("Dashboard session shut down")

    @property
    def has_farm(self) -> bool:
        return self.store.get(DatasetKind.FARM) is not ABSENT

    def register_farm(self, farm: Union[Farm, Dict[str, Any]]) -> Farm:
        """
        Replace the farm with a fully-formed registration.

        The simulated farm delivery is superseded first: a pending one is
        cancelled and one already fetching discards its value, so neither can
        overwrite the registration.

        Raises:
            RegistrationError: if the data does not describe a complete farm
        """
        if not isinstance(farm, Farm):
            try:
                farm = Farm.from_dict(dict(farm))
            except (KeyError, TypeError, ValueError) as e:
                raise RegistrationError(f"Invalid farm registration: {e}") from e

        if not farm.name.strip():
            raise RegistrationError("Farm name is required")
        if farm.size <= 0:
            raise RegistrationError("Farm size must be positive")

        self.simulator.cancel(DatasetKind.FARM)
        self._update_farm(farm)
        log.info(f"Registered farm {farm.name} ({farm.size} acres)")
        return farm

    def view(self) -> DashboardView:
        return build_dashboard_view(self.store, self.notifications, self.settings)


def create_session() -> DashboardSession:
    """Session with settings from $AGRIINTEL_SETTINGS (or defaults) and a threaded scheduler."""
    return DashboardSession(settings=load_settings())


def session_from_state(state: MutableMapping, factory: Callable[[], DashboardSession] = None) -> DashboardSession:
    """
    Get the session stored in ``state`` (e.g. Streamlit's session_state), creating
    and starting one on first use.
    """
    session = state.get(SESSION_KEY)
    if session is None:
        session = (factory or create_session)()
        session.start()
        state[SESSION_KEY] = session
    return session


def restart_session(state: MutableMapping, factory: Callable[[], DashboardSession] = None) -> DashboardSession:
    """Shut down the current session (if any) and start a fresh one."""
    old = state.pop(SESSION_KEY, None)
    if old is not None:
        old.shutdown()
    return session_from_state(state, factory)
