"""Countdown state derivation.

``evaluate`` turns a timer and an instant into a :class:`Snapshot`: which
phase the timer is in, how many milliseconds remain until the next phase
boundary, and how many loop cycles have completed. It is pure and total;
malformed timers (end before start, negative duration, neither end nor
duration) are not rejected, they simply fall through the branches below.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from countdown.shared.models.timer import Timer

MS_PER_MINUTE = 60_000

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


class Phase(StrEnum):
    BEFORE = "before"
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Snapshot:
    """Result of evaluating a timer at one instant. Never persisted."""

    phase: Phase
    remaining_ms: int | None
    loop_count: int = 0


def to_epoch_ms(instant: datetime) -> int:
    """Whole milliseconds since the Unix epoch (floored)."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return (instant - _EPOCH) // _ONE_MS


def _loop_duration_ms(timer: Timer) -> int:
    if not timer.loop or timer.duration is None:
        return 0
    return max(int(timer.duration), 0) * MS_PER_MINUTE


def evaluate(timer: Timer, now: datetime) -> Snapshot:
    """Derive the timer's phase and remaining time at ``now``."""
    now_ms = to_epoch_ms(now)
    start_ms = to_epoch_ms(timer.start_time) if timer.start_time is not None else None
    end_ms = to_epoch_ms(timer.end_time) if timer.end_time is not None else None

    if start_ms is not None and now_ms < start_ms:
        return Snapshot(Phase.BEFORE, start_ms - now_ms)

    if end_ms is not None and now_ms > end_ms:
        loop_ms = _loop_duration_ms(timer)
        if loop_ms <= 0:
            return Snapshot(Phase.EXPIRED, 0)
        loops_completed = (now_ms - end_ms) // loop_ms
        next_boundary = end_ms + (loops_completed + 1) * loop_ms
        return Snapshot(Phase.ACTIVE, next_boundary - now_ms, loops_completed + 1)

    if end_ms is not None:
        return Snapshot(Phase.ACTIVE, end_ms - now_ms)
    if timer.duration is not None and timer.duration > 0:
        # Not anchored to a fixed start: the window is re-measured from now.
        return Snapshot(Phase.ACTIVE, timer.duration * MS_PER_MINUTE)
    return Snapshot(Phase.ACTIVE, None)
