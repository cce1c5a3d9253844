import json

import pytest
from core.errors import SettingsError
from core.settings import DashboardSettings, load_settings, DEFAULT_ARRIVAL_DELAYS, SETTINGS_ENV_VAR


def test_defaults_match_reference_dashboard():
    settings = DashboardSettings()
    assert settings.arrival_delays == DEFAULT_ARRIVAL_DELAYS
    assert settings.arrival_delays["farm"] == 0.5
    assert settings.arrival_delays["crop_health"] == 1.0
    assert settings.readiness_gate == "crop_health"
    assert settings.ndvi_excellent_threshold == 0.7
    assert settings.health_good_threshold == 80
    assert settings.reply_delay_seconds == 1.5
    assert len(settings.response_pool) == 5


def test_defaults_are_not_shared():
    a = DashboardSettings()
    b = DashboardSettings()
    a.arrival_delays["farm"] = 9
    a.response_pool.append("extra")
    assert b.arrival_delays["farm"] == 0.5
    assert len(b.response_pool) == 5


def test_dict_round_trip():
    settings = DashboardSettings(reply_delay_seconds=0.2, fetch_attempts=5)
    restored = DashboardSettings.from_dict(settings.to_dict())
    assert restored == settings


def test_unknown_keys_rejected():
    with pytest.raises(SettingsError, match="bogus"):
        DashboardSettings.from_dict({"bogus": 1})


@pytest.mark.parametrize("overrides", [
    {"fetch_attempts": 0},
    {"response_pool": []},
    {"ndvi_moderate_threshold": 0.9},
    {"health_moderate_threshold": 95},
    {"reply_delay_seconds": -1},
    {"arrival_delays": {"farm": -0.5}},
])
def test_invalid_settings_rejected(overrides):
    with pytest.raises(SettingsError):
        DashboardSettings.from_dict(overrides)


def test_load_settings_defaults_without_path(monkeypatch):
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    assert load_settings() == DashboardSettings()


def test_load_settings_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"reply_delay_seconds": 0.1}))
    settings = load_settings(str(path))
    assert settings.reply_delay_seconds == 0.1
    assert settings.fetch_attempts == 3


def test_load_settings_from_env(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"fetch_attempts": 1}))
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))
    assert load_settings().fetch_attempts == 1


def test_load_settings_bad_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    with pytest.raises(SettingsError):
        load_settings(str(path))
    with pytest.raises(SettingsError):
        load_settings(str(tmp_path / "missing.json"))


def test_load_settings_requires_object(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]")
    with pytest.raises(SettingsError):
        load_settings(str(path))
