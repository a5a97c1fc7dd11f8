"""Riding mood forecasts for ski resorts."""

from .models import DaySample, ForecastSnapshot, HourSample
from .services.mood import Mood, classify, evaluate
from .state import AppState, update

__all__ = [
    "AppState",
    "DaySample",
    "ForecastSnapshot",
    "HourSample",
    "Mood",
    "classify",
    "evaluate",
    "update",
]
