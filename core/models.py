"""
Core data models for the AgriIntel farm dashboard.

Every dataset that arrives at the dashboard is represented here as a plain
dataclass. String fields with a fixed vocabulary (crop status, market trend,
notification type, message sender) are closed enums; parsing an unknown
value fails at the ``from_dict`` boundary rather than deep in the UI.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Tuple


Coordinate = Tuple[float, float]  # (longitude, latitude), GeoJSON order


# ═══════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════
class CropStatus(Enum):
    """Field-level crop condition."""
    HEALTHY = "healthy"
    MODERATE = "moderate"
    SEVERE = "severe"


class SoilStatus(Enum):
    """Where a soil reading sits relative to its optimal range."""
    OPTIMAL = "optimal"
    LOW = "low"
    HIGH = "high"


class MarketTrend(Enum):
    """Direction of the latest price move."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class NotificationType(Enum):
    """Severity of a notification."""
    ALERT = "alert"
    WARNING = "warning"
    INFO = "info"


class Sender(Enum):
    """Author of a chat message."""
    USER = "user"
    ASSISTANT = "assistant"


# ═══════════════════════════════════════════════════════════════════════════
# FARM
# ═══════════════════════════════════════════════════════════════════════════
@dataclass
class Crop:
    """A crop planted on a farm."""
    id: int
    name: str
    area: float          # acres
    planted: str         # ISO date
    status: CropStatus = CropStatus.HEALTHY

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Crop":
        return cls(
            id=data["id"],
            name=data["name"],
            area=float(data["area"]),
            planted=data["planted"],
            status=CropStatus(data.get("status", CropStatus.HEALTHY.value)),
        )


@dataclass
class Farm:
    """
    A registered farm.

    The farm boundary is a closed polygon given as (longitude, latitude)
    pairs. The sum of crop areas is not required to match ``size``.
    """
    name: str
    size: float                                  # acres
    location: str
    coordinates: List[Coordinate]
    soil_type: str = ""
    irrigation: str = ""
    crops: List[Crop] = field(default_factory=list)
    last_updated: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def planted_area(self) -> float:
        return sum(crop.area for crop in self.crops)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "size": self.size,
            "location": self.location,
            "coordinates": [list(point) for point in self.coordinates],
            "soil_type": self.soil_type,
            "irrigation": self.irrigation,
            "crops": [crop.to_dict() for crop in self.crops],
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Farm":
        crops = [Crop.from_dict(c) for c in data.get("crops", [])]
        kwargs: Dict[str, Any] = dict(
            name=data["name"],
            size=float(data["size"]),
            location=data["location"],
            coordinates=[(float(lon), float(lat)) for lon, lat in data.get("coordinates", [])],
            soil_type=data.get("soil_type", ""),
            irrigation=data.get("irrigation", ""),
            crops=crops,
        )
        if data.get("last_updated"):
            kwargs["last_updated"] = data["last_updated"]
        return cls(**kwargs)


# ═══════════════════════════════════════════════════════════════════════════
# FIELD READINGS
# ═══════════════════════════════════════════════════════════════════════════
@dataclass
class NdviSample:
    """A single NDVI reading. Values are nominally in [0, 1] but not checked."""
    date: str
    value: float

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "NdviSample":
        return cls(date=data["date"], value=float(data["value"]))


@dataclass
class SoilParameter:
    """One soil chemistry reading with its optimal range, e.g. '6.0-7.0'."""
    name: str
    value: float
    optimal_range: str
    status: SoilStatus

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "SoilParameter":
        return cls(
            name=data["name"],
            value=float(data["value"]),
            optimal_range=data.get("optimal_range", ""),
            status=SoilStatus(data["status"]),
        )


@dataclass
class WeatherReading:
    """Current conditions at the farm."""
    temperature: float   # °C
    humidity: float      # %
    wind: float          # km/h
    condition: str
    rainfall: float      # mm


@dataclass
class ForecastDay:
    """One day of the short forecast window."""
    day: str
    temperature: float
    condition: str
    rainfall: float


@dataclass
class WeatherSnapshot:
    """Current reading plus a short daily forecast."""
    current: WeatherReading
    forecast: List[ForecastDay] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "WeatherSnapshot":
        return cls(
            current=WeatherReading(**data["current"]),
            forecast=[ForecastDay(**day) for day in data.get("forecast", [])],
        )


@dataclass
class MarketQuote:
    """Latest price for one crop. ``change`` is a signed percentage."""
    crop: str
    price: float
    trend: MarketTrend
    change: float = 0.0

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["trend"] = self.trend.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "MarketQuote":
        return cls(
            crop=data["crop"],
            price=float(data["price"]),
            trend=MarketTrend(data["trend"]),
            change=float(data.get("change", 0.0)),
        )


@dataclass
class CropHealthRecord:
    """Health assessment for one crop. ``health`` is an index on 0-100."""
    crop: str
    health: float
    issues: List[str] = field(default_factory=list)
    treatment: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "CropHealthRecord":
        return cls(
            crop=data["crop"],
            health=float(data["health"]),
            issues=list(data.get("issues", [])),
            treatment=data.get("treatment", ""),
        )


# ═══════════════════════════════════════════════════════════════════════════
# NOTIFICATIONS & CHAT
# ═══════════════════════════════════════════════════════════════════════════
@dataclass
class Notification:
    """An alert shown in the notification bell."""
    id: int
    type: NotificationType
    message: str
    time: str             # relative label, e.g. "2 hours ago"
    read: bool = False

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Notification":
        return cls(
            id=data["id"],
            type=NotificationType(data["type"]),
            message=data["message"],
            time=data.get("time", ""),
            read=bool(data.get("read", False)),
        )


@dataclass
class ChatMessage:
    """A message in the assistant transcript."""
    id: int
    sender: Sender
    text: str

    def to_dict(self) -> Dict:
        return {"id": self.id, "sender": self.sender.value, "text": self.text}
