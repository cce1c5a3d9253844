"""
Core module for the AgriIntel farm dashboard.
Contains data models, dataset ingestion, derived analytics, and the assistant.
"""

from core.models import Farm, Crop, NdviSample, SoilParameter, WeatherSnapshot, MarketQuote, CropHealthRecord, Notification, ChatMessage
from core.settings import DashboardSettings, load_settings
from core.store import DatasetStore, DatasetKind, DatasetStatus, Readiness, ABSENT
from core.scheduler import ManualScheduler, ThreadedScheduler
from core.ingestion import IngestionSimulator
from core.notifications import NotificationCenter
from core.viewport import BoundingBox, ViewportSynchronizer, compute_bounds
from core.assistant import AssistantStub, SubmitOutcome, TurnState
from core.session import DashboardSession

__all__ = [
    # Data model
    "Farm",
    "Crop",
    "NdviSample",
    "SoilParameter",
    "WeatherSnapshot",
    "MarketQuote",
    "CropHealthRecord",
    "Notification",
    "ChatMessage",
    # Configuration
    "DashboardSettings",
    "load_settings",
    # State and orchestration
    "DatasetStore",
    "DatasetKind",
    "DatasetStatus",
    "Readiness",
    "ABSENT",
    "ManualScheduler",
    "ThreadedScheduler",
    "IngestionSimulator",
    "NotificationCenter",
    "BoundingBox",
    "ViewportSynchronizer",
    "compute_bounds",
    "AssistantStub",
    "SubmitOutcome",
    "TurnState",
    "DashboardSession",
]
