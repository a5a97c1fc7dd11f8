from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from snow_cat.models import DaySample, ForecastSnapshot, HourSample

HOURS_PER_DAY = 24
SNOW_WINDOW_HOURS = 48
SHORT_WINDOW_DAYS = 3
LONG_WINDOW_DAYS = 5
SUNNY_CONDITION_CODES = frozenset({800, 801, 802})


class Mood(str, Enum):
    """Riding conditions, from best to worst."""

    JUMPING = "jumping"  # fresh powder
    CARVING = "carving"  # groomers
    SITTING = "sitting"  # heavy, sticky or icy
    SAD_WALK = "sad_walk"  # melting, no snow


@dataclass
class MoodThresholds:
    """Thresholds for the mood rules.

    Values can be overridden via a config mapping, a JSON config file, or
    environment variables prefixed with ``SNOWCAT_MOOD_``.
    """

    powder_snow_mm: float = 15.0
    fresh_snow_mm: float = 8.0
    warm_day_max_c: float = 4.0
    sunny_uv_index: float = 5.0
    freeze_thaw_max_c: float = 3.0
    freeze_thaw_min_c: float = -3.0
    warm_today_max_c: float = 6.0

    @classmethod
    def from_sources(
        cls,
        *,
        config_path: Optional[str] = None,
        env: Mapping[str, str] | None = None,
        config_data: Mapping[str, float] | None = None,
    ) -> "MoodThresholds":
        """Load thresholds from defaults, ``config_data``, a JSON file and the environment.

        Later sources win. Unknown keys are ignored so a shared config file can
        carry settings for other components.
        """

        env = dict(os.environ if env is None else env)
        known = {item.name for item in fields(cls)}
        data: Dict[str, float] = {}

        if config_data:
            data.update({k: float(v) for k, v in config_data.items() if k in known and v is not None})

        if config_path:
            path = Path(config_path)
            if path.exists():
                loaded = json.loads(path.read_text())
                data.update({k: float(v) for k, v in loaded.items() if k in known and v is not None})

        prefix = "SNOWCAT_MOOD_"
        for key, value in env.items():
            if key.startswith(prefix):
                field_name = key.removeprefix(prefix).lower()
                if field_name in known:
                    try:
                        data[field_name] = float(value)
                    except ValueError:
                        continue

        return cls(**data)


DEFAULT_THRESHOLDS = MoodThresholds()


@dataclass(frozen=True)
class MoodSignals:
    snow48h_mm: float
    warm3d_count: int
    warm5d_count: int
    sun3d_count: int
    sun5d_count: int
    freezethaw_count: int
    snow2d_mm: float
    today_max_c: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MoodResult:
    mood: Mood
    signals: MoodSignals
    rationale: str


def _check_offset(offset: int) -> None:
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")


def hour_window(hourly: Sequence[HourSample], offset: int, hours: int = SNOW_WINDOW_HOURS) -> Tuple[HourSample, ...]:
    """Hours ``[offset * 24, offset * 24 + hours)``, truncated to what exists."""
    _check_offset(offset)
    start = min(offset * HOURS_PER_DAY, len(hourly))
    end = min(start + hours, len(hourly))
    return tuple(hourly[start:end])


def day_window(daily: Sequence[DaySample], offset: int, days: int) -> Tuple[DaySample, ...]:
    """Days ``[offset, offset + days)``, truncated to what exists."""
    _check_offset(offset)
    start = min(offset, len(daily))
    end = min(start + days, len(daily))
    return tuple(daily[start:end])


def _value(number: Optional[float]) -> float:
    return number if number is not None else 0.0


def _count(days: Sequence[DaySample], predicate: Callable[[DaySample], bool]) -> int:
    return sum(1 for day in days if predicate(day))


def derive_signals(
    snapshot: ForecastSnapshot,
    offset: int = 0,
    *,
    config: Optional[MoodThresholds] = None,
) -> MoodSignals:
    """Compute the rule inputs for the look-ahead day ``offset``.

    Every window is relative to ``offset``. Windows that run past the end of
    the forecast shrink instead of failing, and missing values count as zero.
    """

    config = config or DEFAULT_THRESHOLDS

    def is_warm(day: DaySample) -> bool:
        return _value(day.temperature_max) >= config.warm_day_max_c

    def is_sunny(day: DaySample) -> bool:
        return day.weather_code in SUNNY_CONDITION_CODES and _value(day.uv_index) >= config.sunny_uv_index

    def is_freeze_thaw(day: DaySample) -> bool:
        return (
            _value(day.temperature_max) >= config.freeze_thaw_max_c
            and _value(day.temperature_min) <= config.freeze_thaw_min_c
        )

    short_days = day_window(snapshot.daily, offset, SHORT_WINDOW_DAYS)
    long_days = day_window(snapshot.daily, offset, LONG_WINDOW_DAYS)
    two_days = day_window(snapshot.daily, offset, 2)

    today_max = snapshot.daily[0].temperature_max if snapshot.daily else None

    return MoodSignals(
        snow48h_mm=sum(_value(hour.snow_one_hour) for hour in hour_window(snapshot.hourly, offset)),
        warm3d_count=_count(short_days, is_warm),
        warm5d_count=_count(long_days, is_warm),
        sun3d_count=_count(short_days, is_sunny),
        sun5d_count=_count(long_days, is_sunny),
        freezethaw_count=_count(short_days, is_freeze_thaw),
        snow2d_mm=sum(_value(day.snow_total) for day in two_days),
        today_max_c=today_max,
    )


def _jumping_reason(signals: MoodSignals, config: MoodThresholds) -> Optional[str]:
    if signals.snow48h_mm >= config.powder_snow_mm:
        return f"{signals.snow48h_mm:.1f}mm of snow in the next 48h"
    if signals.snow2d_mm >= config.powder_snow_mm:
        return f"{signals.snow2d_mm:.1f}mm of snow over two days"
    if signals.snow48h_mm >= config.fresh_snow_mm and signals.warm3d_count == 0:
        return f"{signals.snow48h_mm:.1f}mm of snow and no warm days ahead"
    return None


def _sitting_reason(signals: MoodSignals, config: MoodThresholds) -> Optional[str]:
    little_snow = signals.snow48h_mm < config.fresh_snow_mm
    if signals.warm3d_count >= 2 and little_snow:
        return f"{signals.warm3d_count} warm days in the next 3 with little new snow"
    if signals.sun3d_count >= 2 and little_snow:
        return f"{signals.sun3d_count} sunny days in the next 3 with little new snow"
    if signals.freezethaw_count >= 2:
        return f"{signals.freezethaw_count} freeze-thaw days in the next 3"
    return None


def _sad_walk_reason(signals: MoodSignals, config: MoodThresholds) -> Optional[str]:
    if signals.warm5d_count >= 4 and signals.sun5d_count >= 3:
        return f"{signals.warm5d_count} warm and {signals.sun5d_count} sunny days in the next 5"
    # Anchored to the present day whatever the offset.
    if (
        signals.snow2d_mm == 0
        and signals.sun3d_count >= 2
        and _value(signals.today_max_c) >= config.warm_today_max_c
    ):
        return "no snow, sunny streak and already warm today"
    if signals.snow48h_mm == 0 and signals.sun5d_count >= 4:
        return f"no snow and {signals.sun5d_count} sunny days in the next 5"
    return None


_RULES: Tuple[Tuple[Mood, Callable[[MoodSignals, MoodThresholds], Optional[str]]], ...] = (
    (Mood.JUMPING, _jumping_reason),
    (Mood.SITTING, _sitting_reason),
    (Mood.SAD_WALK, _sad_walk_reason),
)


def mood_from_signals(signals: MoodSignals, config: Optional[MoodThresholds] = None) -> Tuple[Mood, str]:
    """Apply the rules in priority order; the first match wins."""
    config = config or DEFAULT_THRESHOLDS
    for mood, rule in _RULES:
        reason = rule(signals, config)
        if reason:
            return mood, reason
    return Mood.CARVING, "moderate or no new snow without a warm or sunny streak"


def evaluate(
    snapshot: ForecastSnapshot,
    offset: int = 0,
    *,
    config: Optional[MoodThresholds] = None,
) -> MoodResult:
    """Classify the forecast and keep the signals and rationale behind it."""
    signals = derive_signals(snapshot, offset, config=config)
    mood, rationale = mood_from_signals(signals, config)
    return MoodResult(mood=mood, signals=signals, rationale=rationale)


def classify(
    snapshot: ForecastSnapshot,
    offset: int = 0,
    *,
    config: Optional[MoodThresholds] = None,
) -> Mood:
    return evaluate(snapshot, offset, config=config).mood
