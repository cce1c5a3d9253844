import random

import pytest
from unittest.mock import MagicMock
from core.errors import RegistrationError, SettingsError
from core.models import Farm
from core.scheduler import ManualScheduler
from core.session import DashboardSession, SESSION_KEY, restart_session, session_from_state
from core.settings import DashboardSettings
from core.store import DatasetKind, Readiness

NEW_FARM = {
    "name": "Sunrise Acres",
    "size": 3.5,
    "location": "Eldoret",
    "soil_type": "Clay",
    "irrigation": "Sprinkler",
    "coordinates": [[35.27, 0.51], [35.28, 0.51], [35.28, 0.52], [35.27, 0.52]],
    "crops": [{"id": 1, "name": "Wheat", "area": 3.0, "planted": "2023-06-01"}],
}


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def session(scheduler):
    session = DashboardSession(settings=DashboardSettings(), scheduler=scheduler, rng=random.Random(1))
    session.start()
    yield session
    session.shutdown()


def test_loads_reference_dashboard(session, scheduler):
    assert session.view().is_loading
    assert session.view().unread_count == 2
    scheduler.run_until_idle()
    view = session.view()
    assert view.readiness == Readiness.READY
    assert all(panel.ready for panel in view.panels.values())
    assert session.viewport.current_bounds is not None


def test_register_farm_before_delivery(session, scheduler):
    assert not session.has_farm
    farm = session.register_farm(NEW_FARM)

    assert session.has_farm
    assert session.store.get(DatasetKind.FARM) is farm
    assert session.viewport.current_bounds.min_longitude == 35.27

    scheduler.run_until_idle()
    assert session.store.get(DatasetKind.FARM).name == "Sunrise Acres"
    assert session.store.write_count(DatasetKind.FARM) == 1
    assert session.store.readiness == Readiness.READY


def test_register_farm_after_delivery(session, scheduler):
    scheduler.advance(0.55)
    assert session.store.get(DatasetKind.FARM).name == "Green Valley Farm"
    session.register_farm(Farm.from_dict(NEW_FARM))
    assert session.store.get(DatasetKind.FARM).name == "Sunrise Acres"
    assert session.viewport.fit_count == 2


@pytest.mark.parametrize("data", [
    {"size": 1, "location": "x"},
    {**NEW_FARM, "name": "  "},
    {**NEW_FARM, "size": 0},
    {**NEW_FARM, "size": "lots"},
    {**NEW_FARM, "coordinates": [[35.27]]},
])
def test_invalid_registration_rejected(session, data):
    with pytest.raises(RegistrationError):
        session.register_farm(data)
    assert not session.has_farm


def test_fit_callback(scheduler):
    on_fit = MagicMock()
    session = DashboardSession(scheduler=scheduler, on_fit=on_fit)
    session.start()
    scheduler.advance(0.55)
    on_fit.assert_called_once()
    session.shutdown()


def test_shutdown_cancels_everything(session, scheduler):
    session.assistant.submit("hello")
    session.shutdown()
    scheduler.advance(5)
    assert session.store.get(DatasetKind.NDVI) is not None
    assert not session.store.get(DatasetKind.NDVI)
    assert len(session.assistant.messages) == 1
    assert scheduler.closed


def test_session_from_state_creates_once():
    state = {}
    factory = MagicMock(side_effect=lambda: DashboardSession(scheduler=ManualScheduler()))
    first = session_from_state(state, factory)
    second = session_from_state(state, factory)
    assert first is second
    assert state[SESSION_KEY] is first
    assert factory.call_count == 1
    assert first.simulator.started
    first.shutdown()


def test_restart_session():
    state = {}
    factory = lambda: DashboardSession(scheduler=ManualScheduler())
    old = session_from_state(state, factory)
    new = restart_session(state, factory)
    assert new is not old
    assert old.scheduler.closed
    assert state[SESSION_KEY] is new
    new.shutdown()


def test_invalid_settings_rejected_at_construction(scheduler):
    with pytest.raises(SettingsError):
        DashboardSession(settings=DashboardSettings(response_pool=[]), scheduler=scheduler)
