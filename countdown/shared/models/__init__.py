"""Shared data models."""

from .timer import Timer, TimerDraft, TimerStyle, UrgencySettings, parse_instant

__all__ = [
    "Timer",
    "TimerDraft",
    "TimerStyle",
    "UrgencySettings",
    "parse_instant",
]
