"""
Derived Analytics Engine

Pure functions that turn raw dataset values into presentation-ready data:
classified series, colour keys, glyphs and short interpretations. Nothing
is cached; every call recomputes from its inputs. Every function accepts
ABSENT (or an empty collection) and returns an empty or neutral result.

Out-of-range inputs are never rejected. Classification thresholds are
open-ended at both extremes, so e.g. an NDVI of 1.4 is simply "excellent"
and a health index of -10 is simply "poor".
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.models import (
    CropStatus, MarketQuote, MarketTrend, NdviSample, SoilStatus, Coordinate,
)
from core.settings import DashboardSettings
from core.store import ABSENT, DatasetKind, DatasetStatus, DatasetStore, Readiness

_DEFAULTS = DashboardSettings()

# Colour keys; the theme maps them to concrete colours.
GREEN = "green"
AMBER = "amber"
RED = "red"
GRAY = "gray"


def _items(value: Any) -> list:
    if value is ABSENT or value is None:
        return []
    return list(value)


# ═══════════════════════════════════════════════════════════════════════════
# CROP HEALTH
# ═══════════════════════════════════════════════════════════════════════════
class HealthBand(Enum):
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


HEALTH_BAND_COLORS = {
    HealthBand.GOOD: GREEN,
    HealthBand.MODERATE: AMBER,
    HealthBand.POOR: RED,
}


@dataclass(frozen=True)
class HealthPoint:
    label: str
    value: float
    band: HealthBand
    color: str
    issues: Tuple[str, ...] = ()
    treatment: str = ""


def classify_health(index: float, settings: DashboardSettings = _DEFAULTS) -> HealthBand:
    """
    Bucket a 0-100 health index.

    >80 is good, >60 is moderate, anything else (including NaN) is poor.
    """
    if index > settings.health_good_threshold:
        return HealthBand.GOOD
    if index > settings.health_moderate_threshold:
        return HealthBand.MODERATE
    return HealthBand.POOR


def crop_health_series(records: Any, settings: DashboardSettings = _DEFAULTS) -> List[HealthPoint]:
    """One point per crop health record, in delivery order."""
    points = []
    for record in _items(records):
        band = classify_health(record.health, settings)
        points.append(HealthPoint(
            label=record.crop,
            value=record.health,
            band=band,
            color=HEALTH_BAND_COLORS[band],
            issues=tuple(record.issues),
            treatment=record.treatment,
        ))
    return points


# ═══════════════════════════════════════════════════════════════════════════
# NDVI
# ═══════════════════════════════════════════════════════════════════════════
class NdviVigor(Enum):
    EXCELLENT = "excellent vigor"
    MODERATE = "moderate vigor, check nutrients"
    LOW = "low vigor, attention required"


NDVI_MESSAGES = {
    NdviVigor.EXCELLENT: "Excellent crop vigor detected. Maintain current practices.",
    NdviVigor.MODERATE: "Moderate crop vigor. Consider checking soil nutrients.",
    NdviVigor.LOW: "Low crop vigor detected. Immediate attention recommended.",
}

NDVI_COLORS = {
    NdviVigor.EXCELLENT: GREEN,
    NdviVigor.MODERATE: AMBER,
    NdviVigor.LOW: RED,
}


@dataclass(frozen=True)
class NdviInterpretation:
    value: float
    vigor: NdviVigor
    message: str
    color: str


def classify_ndvi(value: float, settings: DashboardSettings = _DEFAULTS) -> NdviVigor:
    """Strict '>' on both thresholds; 0.7 exactly is moderate."""
    if value > settings.ndvi_excellent_threshold:
        return NdviVigor.EXCELLENT
    if value > settings.ndvi_moderate_threshold:
        return NdviVigor.MODERATE
    return NdviVigor.LOW


def interpret_ndvi(value: float, settings: DashboardSettings = _DEFAULTS) -> NdviInterpretation:
    vigor = classify_ndvi(value, settings)
    return NdviInterpretation(value=value, vigor=vigor, message=NDVI_MESSAGES[vigor], color=NDVI_COLORS[vigor])


def latest_ndvi(samples: Any) -> Optional[NdviSample]:
    """The last sample in delivery order (not the maximum)."""
    items = _items(samples)
    return items[-1] if items else None


def ndvi_series(samples: Any) -> List[Tuple[str, float]]:
    return [(s.date, s.value) for s in _items(samples)]


def ndvi_summary(samples: Any, settings: DashboardSettings = _DEFAULTS) -> Optional[NdviInterpretation]:
    """Interpretation of the latest sample, or None without samples."""
    latest = latest_ndvi(samples)
    if latest is None:
        return None
    return interpret_ndvi(latest.value, settings)


# ═══════════════════════════════════════════════════════════════════════════
# MARKET
# ═══════════════════════════════════════════════════════════════════════════
MARKET_STYLES = {
    MarketTrend.UP: (GREEN, "▲"),
    MarketTrend.DOWN: (RED, "▼"),
    MarketTrend.STABLE: (GRAY, "→"),
}


@dataclass(frozen=True)
class MarketView:
    crop: str
    price: float
    trend: MarketTrend
    color: str
    glyph: str
    magnitude: float

    @property
    def change_label(self) -> str:
        return f"{self.glyph} {self.magnitude:g}%"


def classify_quote(quote: MarketQuote) -> MarketView:
    color, glyph = MARKET_STYLES[quote.trend]
    return MarketView(
        crop=quote.crop,
        price=quote.price,
        trend=quote.trend,
        color=color,
        glyph=glyph,
        magnitude=abs(quote.change),
    )


def classify_market(quotes: Any) -> List[MarketView]:
    return [classify_quote(q) for q in _items(quotes)]


# ═══════════════════════════════════════════════════════════════════════════
# SOIL
# ═══════════════════════════════════════════════════════════════════════════
SOIL_COLORS = {
    SoilStatus.OPTIMAL: GREEN,
    SoilStatus.LOW: AMBER,
    SoilStatus.HIGH: RED,
}


@dataclass(frozen=True)
class SoilView:
    name: str
    value: float
    optimal_range: str
    status: SoilStatus
    color: str


def classify_soil(params: Any) -> List[SoilView]:
    return [
        SoilView(p.name, p.value, p.optimal_range, p.status, SOIL_COLORS[p.status])
        for p in _items(params)
    ]


# ═══════════════════════════════════════════════════════════════════════════
# FARM & WEATHER
# ═══════════════════════════════════════════════════════════════════════════
CROP_STATUS_COLORS = {
    CropStatus.HEALTHY: GREEN,
    CropStatus.MODERATE: AMBER,
    CropStatus.SEVERE: RED,
}


def crop_status_color(status: CropStatus) -> str:
    return CROP_STATUS_COLORS[status]


@dataclass(frozen=True)
class FarmSummary:
    crop_count: int
    planted_area: float
    size: float

    @property
    def unplanted_area(self) -> float:
        """Advisory only; negative when crop areas exceed the farm size."""
        return self.size - self.planted_area


def farm_summary(farm: Any) -> Optional[FarmSummary]:
    if farm is ABSENT or farm is None:
        return None
    return FarmSummary(crop_count=len(farm.crops), planted_area=farm.planted_area, size=farm.size)


def viewport_geometry(farm: Any) -> List[Coordinate]:
    """Farm boundary handed to the viewport, unmodified."""
    if farm is ABSENT or farm is None:
        return []
    return farm.coordinates


_WEATHER_ICONS = {
    "sunny": "sun",
    "rainy": "rain",
    "light rain": "rain",
    "windy": "wind",
    "cloudy": "cloud",
    "partly cloudy": "cloud",
}


def weather_icon(condition: str) -> str:
    """Icon key for a weather condition; unknown conditions show the sun."""
    return _WEATHER_ICONS.get((condition or "").strip().lower(), "sun")


def rainfall_label(rainfall_mm: float) -> str:
    if rainfall_mm is None or math.isnan(rainfall_mm) or rainfall_mm <= 0:
        return "Dry"
    return f"{rainfall_mm:g}mm"


# ═══════════════════════════════════════════════════════════════════════════
# DASHBOARD VIEW
# ═══════════════════════════════════════════════════════════════════════════
@dataclass
class Panel:
    """One dashboard panel: its dataset status plus whatever could be derived."""
    status: DatasetStatus
    data: Any = None
    error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self.status == DatasetStatus.ARRIVED


@dataclass
class DashboardView:
    readiness: Readiness
    panels: Dict[DatasetKind, Panel] = field(default_factory=dict)
    unread_count: int = 0

    @property
    def is_loading(self) -> bool:
        return self.readiness == Readiness.LOADING

    def panel(self, kind: DatasetKind) -> Panel:
        return self.panels[kind]


def _panel(store: DatasetStore, kind: DatasetKind, derive) -> Panel:
    status, value, error = store.entry(kind)
    if status != DatasetStatus.ARRIVED:
        return Panel(status=status, error=error)
    return Panel(status=status, data=derive(value))


def build_dashboard_view(store: DatasetStore, notifications=None,
                         settings: DashboardSettings = _DEFAULTS) -> DashboardView:
    """Compose every panel from the store's current contents."""
    panels = {
        DatasetKind.FARM: _panel(store, DatasetKind.FARM, lambda farm: {
            "farm": farm,
            "summary": farm_summary(farm),
            "crop_colors": {c.id: crop_status_color(c.status) for c in farm.crops},
        }),
        DatasetKind.NDVI: _panel(store, DatasetKind.NDVI, lambda samples: {
            "series": ndvi_series(samples),
            "latest": ndvi_summary(samples, settings),
        }),
        DatasetKind.SOIL: _panel(store, DatasetKind.SOIL, classify_soil),
        DatasetKind.WEATHER: _panel(store, DatasetKind.WEATHER, lambda weather: {
            "weather": weather,
            "icon": weather_icon(weather.current.condition),
            "forecast": [
                (day, weather_icon(day.condition), rainfall_label(day.rainfall))
                for day in weather.forecast
            ],
        }),
        DatasetKind.MARKET: _panel(store, DatasetKind.MARKET, classify_market),
        DatasetKind.CROP_HEALTH: _panel(
            store, DatasetKind.CROP_HEALTH, lambda records: crop_health_series(records, settings)
        ),
    }

    unread = 0
    if notifications is not None:
        panels[DatasetKind.NOTIFICATIONS] = Panel(
            status=notifications.status,
            data=notifications.notifications,
            error=notifications.error,
        )
        unread = notifications.unread_count

    return DashboardView(readiness=store.readiness, panels=panels, unread_count=unread)
