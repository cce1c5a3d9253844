import pytest
from core.models import (
    Crop, CropStatus, Farm, MarketQuote, MarketTrend, Notification, NotificationType,
    SoilParameter, SoilStatus, WeatherSnapshot, CropHealthRecord, ChatMessage, Sender,
)
from core.sample_data import load_farm, load_weather


def test_farm_defaults():
    """Verify Farm defaults and derived planted area."""
    farm = Farm(name="Plot", size=3.0, location="Nakuru", coordinates=[(36.0, -1.0)])
    assert farm.crops == []
    assert farm.soil_type == ""
    assert farm.planted_area == 0
    assert farm.last_updated  # set automatically


def test_crop_areas_need_not_match_farm_size():
    farm = load_farm()
    assert farm.planted_area == pytest.approx(5.2)
    farm.crops.append(Crop(id=4, name="Kale", area=10, planted="2023-05-01"))
    assert farm.planted_area > farm.size


def test_farm_dict_round_trip():
    farm = load_farm()
    restored = Farm.from_dict(farm.to_dict())
    assert restored == farm
    assert restored.crops[1].status == CropStatus.MODERATE


def test_farm_from_dict_parses_coordinates():
    farm = Farm.from_dict({
        "name": "Ridge",
        "size": "4",
        "location": "Kiambu",
        "coordinates": [[36.8, -1.2], [36.9, -1.1]],
    })
    assert farm.size == 4.0
    assert farm.coordinates == [(36.8, -1.2), (36.9, -1.1)]


def test_unknown_enum_value_rejected():
    """Closed enums fail at the parsing boundary."""
    with pytest.raises(ValueError):
        MarketQuote.from_dict({"crop": "Maize", "price": 10, "trend": "sideways"})
    with pytest.raises(ValueError):
        SoilParameter.from_dict({"name": "pH", "value": 6, "status": "unknown"})
    with pytest.raises(ValueError):
        Notification.from_dict({"id": 1, "type": "urgent", "message": "x"})


def test_enum_values_serialised_as_strings():
    quote = MarketQuote("Maize", 45, MarketTrend.UP, 2.5)
    assert quote.to_dict()["trend"] == "up"
    note = Notification(1, NotificationType.ALERT, "Irrigate", "now")
    assert note.to_dict()["type"] == "alert"
    msg = ChatMessage(id=1, sender=Sender.ASSISTANT, text="hi")
    assert msg.to_dict() == {"id": 1, "sender": "assistant", "text": "hi"}


def test_weather_round_trip():
    weather = load_weather()
    restored = WeatherSnapshot.from_dict(weather.to_dict())
    assert restored == weather
    assert len(restored.forecast) == 5


def test_crop_health_record_from_dict():
    record = CropHealthRecord.from_dict({"crop": "Beans", "health": 72, "issues": ["Aphids detected"]})
    assert record.health == 72.0
    assert record.treatment == ""
    assert SoilStatus("low") == SoilStatus.LOW
