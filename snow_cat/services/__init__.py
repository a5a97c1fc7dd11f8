"""Service layer for mood classification."""

from .mood import Mood, MoodResult, MoodSignals, MoodThresholds, classify, derive_signals, evaluate

__all__ = ["Mood", "MoodResult", "MoodSignals", "MoodThresholds", "classify", "derive_signals", "evaluate"]
