"""
Dashboard Settings

Every tunable constant of the dashboard lives in one dataclass with an
explicit default. Settings can be loaded from a JSON file; the path may be
supplied through the ``AGRIINTEL_SETTINGS`` environment variable.
"""

import json
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Dict, List, Optional
import logging

from core.errors import SettingsError

log = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "AGRIINTEL_SETTINGS"


# Simulated latency of each dataset source, in seconds.
DEFAULT_ARRIVAL_DELAYS: Dict[str, float] = {
    "farm": 0.5,
    "ndvi": 0.6,
    "soil": 0.7,
    "weather": 0.8,
    "market": 0.9,
    "crop_health": 1.0,
}

DEFAULT_RESPONSE_POOL: List[str] = [
    "Based on your farm data, I recommend increasing irrigation frequency by 20% for the next two weeks.",
    "The optimal planting window for maize in your area is between March 15 and April 10.",
    "Your soil test shows slightly low potassium levels. Consider applying potassium-rich fertilizer.",
    "Current market prices suggest holding your maize harvest for 2 more weeks for better returns.",
    "The weather forecast indicates potential rainfall next week, so you might reduce irrigation.",
]


@dataclass
class DashboardSettings:
    """
    All configurable settings for a dashboard session.

    Defaults reproduce the reference dashboard behaviour.
    """

    # Ingestion
    arrival_delays: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_ARRIVAL_DELAYS))
    """Seconds before each dataset kind is delivered, keyed by kind value."""

    readiness_gate: str = "crop_health"
    """Dataset kind whose delivery clears the global loading indicator."""

    fetch_attempts: int = 3
    """How many times a dataset source is called before the dataset is marked failed."""

    retry_backoff_seconds: float = 0.0
    """Initial wait between source retries. Doubles per attempt; 0 retries immediately."""

    # NDVI interpretation
    ndvi_excellent_threshold: float = 0.7
    """NDVI strictly above this value means excellent vigor."""

    ndvi_moderate_threshold: float = 0.5
    """NDVI strictly above this value (and not excellent) means moderate vigor."""

    # Crop health bands
    health_good_threshold: float = 80
    """Health index strictly above this value is 'good'."""

    health_moderate_threshold: float = 60
    """Health index strictly above this value (and not good) is 'moderate'."""

    # Assistant
    reply_delay_seconds: float = 1.5
    """How long the assistant 'composes' before its reply is appended."""

    response_pool: List[str] = field(default_factory=lambda: list(DEFAULT_RESPONSE_POOL))
    """Fixed replies; one is picked uniformly at random per user message."""

    def delay_for(self, kind: str) -> Optional[float]:
        """Configured delay for a dataset kind, or None if it is not scheduled."""
        return self.arrival_delays.get(kind)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "DashboardSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(sorted(unknown))}")

        settings = cls(**data)
        settings.validate()
        return settings

    def validate(self):
        """Reject settings that would make the dashboard misbehave."""
        if self.fetch_attempts < 1:
            raise SettingsError("fetch_attempts must be at least 1")
        if not self.response_pool:
            raise SettingsError("response_pool must not be empty")
        if self.ndvi_moderate_threshold > self.ndvi_excellent_threshold:
            raise SettingsError("ndvi_moderate_threshold must not exceed ndvi_excellent_threshold")
        if self.health_moderate_threshold > self.health_good_threshold:
            raise SettingsError("health_moderate_threshold must not exceed health_good_threshold")
        negative = [k for k, v in self.arrival_delays.items() if v < 0]
        if negative or self.reply_delay_seconds < 0:
            raise SettingsError(f"Delays must be non-negative: {negative or ['reply_delay_seconds']}")


def load_settings(path: Optional[str] = None) -> DashboardSettings:
    """
    Load settings from a JSON file.

    Args:
        path: JSON file to read. Falls back to $AGRIINTEL_SETTINGS, then defaults.

    Returns:
        The loaded settings (defaults for anything the file omits)
    """
    path = path or os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return DashboardSettings()

    settings_file = Path(path)
    try:
        with open(settings_file, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SettingsError(f"Could not read settings from {settings_file}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {settings_file} must contain a JSON object")

    settings = DashboardSettings.from_dict(data)
    log.info(f"Loaded dashboard settings from {settings_file}")
    return settings
