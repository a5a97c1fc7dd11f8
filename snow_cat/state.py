"""Application state for a mood viewer.

The viewer keeps a single immutable :class:`AppState` and derives each new
state from the previous one with :func:`update`. Fetching forecasts and
rendering are left to the caller; ``update`` only records their outcome.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from snow_cat.models import ForecastSnapshot
from snow_cat.services.mood import Mood, MoodThresholds, classify


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class AppState:
    resort: Optional[str] = None
    offset: int = 0
    forecast: Optional[ForecastSnapshot] = None
    status: LoadStatus = LoadStatus.IDLE
    mood: Optional[Mood] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ResortSelected:
    resort: str


@dataclass(frozen=True)
class ForecastLoaded:
    forecast: ForecastSnapshot
    # Resort the forecast was requested for; responses for another resort are dropped.
    resort: Optional[str] = None


@dataclass(frozen=True)
class ForecastFailed:
    error: str
    resort: Optional[str] = None


@dataclass(frozen=True)
class OffsetSelected:
    offset: int


Action = Union[ResortSelected, ForecastLoaded, ForecastFailed, OffsetSelected]


def available_offsets(state: AppState) -> range:
    if state.forecast is None:
        return range(0)
    return range(len(state.forecast.daily))


def _is_stale(state: AppState, resort: Optional[str]) -> bool:
    return resort is not None and resort != state.resort


def update(state: AppState, action: Action, *, config: Optional[MoodThresholds] = None) -> AppState:
    """Return the state that follows ``action``; ``state`` itself is never changed."""

    if isinstance(action, ResortSelected):
        return AppState(resort=action.resort, status=LoadStatus.LOADING)

    if isinstance(action, ForecastLoaded):
        if _is_stale(state, action.resort):
            return state
        offset = state.offset if state.offset < len(action.forecast.daily) else 0
        return replace(
            state,
            offset=offset,
            forecast=action.forecast,
            status=LoadStatus.READY,
            mood=classify(action.forecast, offset, config=config),
            error=None,
        )

    if isinstance(action, ForecastFailed):
        if _is_stale(state, action.resort):
            return state
        return replace(state, forecast=None, status=LoadStatus.ERROR, mood=None, error=action.error)

    if isinstance(action, OffsetSelected):
        if state.forecast is None:
            if action.offset < 0:
                return state
            return replace(state, offset=action.offset)
        if action.offset not in available_offsets(state):
            return state
        return replace(
            state,
            offset=action.offset,
            mood=classify(state.forecast, action.offset, config=config),
        )

    raise TypeError(f"Unsupported action: {type(action).__name__}")
