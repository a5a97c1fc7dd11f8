from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


def _first_condition(entry: Mapping[str, Any]) -> Mapping[str, Any]:
    conditions = entry.get("weather") or []
    if conditions and isinstance(conditions[0], Mapping):
        return conditions[0]
    return {}


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


@dataclass(frozen=True)
class HourSample:
    """One hour of forecast data.

    Units follow the metric One Call layout: Celsius, millimeters of snow
    water equivalent per hour and a probability of precipitation in [0, 1].
    """

    timestamp: int
    snow_one_hour: Optional[float] = None
    temperature: Optional[float] = None
    precipitation_probability: Optional[float] = None
    weather_code: Optional[int] = None
    weather_main: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "dt": self.timestamp,
            "temp": self.temperature,
            "pop": self.precipitation_probability,
            "weather": [],
        }
        if self.snow_one_hour is not None:
            data["snow"] = {"1h": self.snow_one_hour}
        if self.weather_code is not None or self.weather_main is not None:
            data["weather"].append({"id": self.weather_code, "main": self.weather_main})
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HourSample":
        snow = data.get("snow") or {}
        condition = _first_condition(data)
        return cls(
            timestamp=int(data.get("dt") or 0),
            snow_one_hour=_as_float(snow.get("1h")) if isinstance(snow, Mapping) else None,
            temperature=_as_float(data.get("temp")),
            precipitation_probability=_as_float(data.get("pop")),
            weather_code=_as_int(condition.get("id")),
            weather_main=condition.get("main"),
        )


@dataclass(frozen=True)
class DaySample:
    """One calendar day of forecast data."""

    temperature_max: Optional[float] = None
    temperature_min: Optional[float] = None
    snow_total: Optional[float] = None
    uv_index: Optional[float] = None
    weather_code: Optional[int] = None
    weather_description: Optional[str] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "temp": {"max": self.temperature_max, "min": self.temperature_min},
            "uvi": self.uv_index,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "weather": [],
        }
        if self.snow_total is not None:
            data["snow"] = self.snow_total
        if self.weather_code is not None or self.weather_description is not None:
            data["weather"].append({"id": self.weather_code, "description": self.weather_description})
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DaySample":
        temp = data.get("temp") or {}
        condition = _first_condition(data)
        return cls(
            temperature_max=_as_float(temp.get("max")),
            temperature_min=_as_float(temp.get("min")),
            snow_total=_as_float(data.get("snow")),
            uv_index=_as_float(data.get("uvi")),
            weather_code=_as_int(condition.get("id")),
            weather_description=condition.get("description"),
            humidity=_as_float(data.get("humidity")),
            wind_speed=_as_float(data.get("wind_speed")),
        )


@dataclass(frozen=True)
class ForecastSnapshot:
    """Hourly and daily forecast for one location, both in chronological order.

    The snapshot is immutable: ``hourly`` and ``daily`` are tuples of frozen
    samples, so nothing downstream can alter a forecast it was handed.
    """

    hourly: Tuple[HourSample, ...] = field(default_factory=tuple)
    daily: Tuple[DaySample, ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, hourly: Sequence[HourSample], daily: Sequence[DaySample]) -> "ForecastSnapshot":
        return cls(hourly=tuple(hourly), daily=tuple(daily))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hourly": [hour.to_dict() for hour in self.hourly],
            "daily": [day.to_dict() for day in self.daily],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ForecastSnapshot":
        """Build a snapshot from a One Call style payload.

        Both ``hourly`` and ``daily`` must be present. Shorter arrays are
        fine; a payload without either key is rejected.
        """
        missing = [key for key in ("hourly", "daily") if data.get(key) is None]
        if missing:
            raise ValueError(f"Forecast payload is missing {', '.join(missing)}")

        hourly = data["hourly"]
        daily = data["daily"]
        if any(not isinstance(entries, Sequence) or isinstance(entries, str) for entries in (hourly, daily)):
            raise TypeError("hourly and daily must be lists of forecast entries")

        return cls(
            hourly=tuple(HourSample.from_dict(hour) for hour in hourly),
            daily=tuple(DaySample.from_dict(day) for day in daily),
        )
