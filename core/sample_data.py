"""
Reference datasets for the simulated dashboard.

These stand in for the farm, satellite, soil, weather, market and agronomy
services. Each ``load_*`` function returns a fresh object so that a session
can never mutate another session's data.
"""

from datetime import datetime
from typing import Callable, Dict, List, Any

from core.models import (
    Crop, CropStatus, Farm, NdviSample, SoilParameter, SoilStatus,
    WeatherSnapshot, WeatherReading, ForecastDay, MarketQuote, MarketTrend,
    CropHealthRecord, Notification, NotificationType,
)
from core.store import DatasetKind


def load_farm() -> Farm:
    return Farm(
        name="Green Valley Farm",
        size=5.2,
        location="Nairobi, Kenya",
        coordinates=[
            (36.815, -1.295),
            (36.820, -1.295),
            (36.820, -1.290),
            (36.815, -1.290),
        ],
        soil_type="Loamy",
        irrigation="Drip system",
        crops=[
            Crop(id=1, name="Maize", area=2.5, planted="2023-03-15", status=CropStatus.HEALTHY),
            Crop(id=2, name="Beans", area=1.2, planted="2023-03-20", status=CropStatus.MODERATE),
            Crop(id=3, name="Tomatoes", area=1.5, planted="2023-04-01", status=CropStatus.HEALTHY),
        ],
        last_updated=datetime.now().isoformat(),
    )


def load_ndvi() -> List[NdviSample]:
    return [
        NdviSample("2023-01-01", 0.65),
        NdviSample("2023-02-01", 0.68),
        NdviSample("2023-03-01", 0.72),
        NdviSample("2023-04-01", 0.75),
        NdviSample("2023-05-01", 0.78),
    ]


def load_soil() -> List[SoilParameter]:
    return [
        SoilParameter("pH", 6.5, "6.0-7.0", SoilStatus.OPTIMAL),
        SoilParameter("Nitrogen", 25, "20-30", SoilStatus.OPTIMAL),
        SoilParameter("Phosphorus", 15, "15-25", SoilStatus.OPTIMAL),
        SoilParameter("Potassium", 18, "20-30", SoilStatus.LOW),
        SoilParameter("Moisture", 62, "60-70", SoilStatus.OPTIMAL),
    ]


def load_weather() -> WeatherSnapshot:
    return WeatherSnapshot(
        current=WeatherReading(
            temperature=25, humidity=65, wind=12, condition="Partly Cloudy", rainfall=0,
        ),
        forecast=[
            ForecastDay("Today", 25, "Partly Cloudy", 0),
            ForecastDay("Tomorrow", 24, "Light Rain", 2.5),
            ForecastDay("Day 3", 26, "Sunny", 0),
            ForecastDay("Day 4", 27, "Sunny", 0),
            ForecastDay("Day 5", 25, "Cloudy", 1.2),
        ],
    )


def load_market() -> List[MarketQuote]:
    return [
        MarketQuote("Maize", 45, MarketTrend.UP, 2.5),
        MarketQuote("Beans", 120, MarketTrend.STABLE, 0),
        MarketQuote("Tomatoes", 80, MarketTrend.DOWN, -5),
        MarketQuote("Wheat", 65, MarketTrend.UP, 3.2),
        MarketQuote("Potatoes", 55, MarketTrend.UP, 1.8),
    ]


def load_crop_health() -> List[CropHealthRecord]:
    return [
        CropHealthRecord("Maize", 85, ["Minor leaf spot"], "Apply fungicide if spreads"),
        CropHealthRecord("Beans", 72, ["Aphids detected"], "Apply neem oil spray"),
        CropHealthRecord("Tomatoes", 90, [], "None required"),
    ]


def load_notifications() -> List[Notification]:
    return [
        Notification(1, NotificationType.ALERT, "Irrigation scheduled for tomorrow morning", "2 hours ago", read=False),
        Notification(2, NotificationType.WARNING, "Potential pest activity detected in maize field", "1 day ago", read=False),
        Notification(3, NotificationType.INFO, "Soil test results available", "3 days ago", read=True),
    ]


def default_sources() -> Dict[DatasetKind, Callable[[], Any]]:
    """Source callable for every dataset kind."""
    return {
        DatasetKind.FARM: load_farm,
        DatasetKind.NDVI: load_ndvi,
        DatasetKind.SOIL: load_soil,
        DatasetKind.WEATHER: load_weather,
        DatasetKind.MARKET: load_market,
        DatasetKind.CROP_HEALTH: load_crop_health,
        DatasetKind.NOTIFICATIONS: load_notifications,
    }
