"""Shared repository layer."""

from .timer import TimerRepository

__all__ = ["TimerRepository"]
