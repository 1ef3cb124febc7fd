"""Storefront countdown host: fetches active timers and ticks them."""

from .client import StorefrontClient, StorefrontError
from .ticker import CountdownTicker, TickState, TimerFrame, build_frames

__all__ = [
    "CountdownTicker",
    "StorefrontClient",
    "StorefrontError",
    "TickState",
    "TimerFrame",
    "build_frames",
]
