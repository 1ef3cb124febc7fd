"""Storefront countdown host loop.

A :class:`CountdownTicker` refreshes the timer list on a slow cadence and
re-evaluates every timer on each one-second tick, handing the result to a
render callback. Time comes from an injected clock and waiting goes
through an injected ``sleep`` coroutine, so tests can drive the loop on
virtual time.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from countdown.shared.clock import Clock, SystemClock
from countdown.shared.countdown import Snapshot, evaluate
from countdown.shared.models.timer import Timer
from countdown.shared.presentation import PresentationView, present
from countdown.widget.client import StorefrontClient, StorefrontError

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0
REFRESH_INTERVAL = 30.0


@dataclass(frozen=True)
class TimerFrame:
    timer: Timer
    snapshot: Snapshot
    view: PresentationView


@dataclass
class TickState:
    """Everything a host needs to draw one tick."""

    now: datetime
    frames: list[TimerFrame] = field(default_factory=list)
    loading: bool = False
    error: str | None = None

    @property
    def visible_frames(self) -> list[TimerFrame]:
        return [f for f in self.frames if not f.view.should_hide]


RenderCallback = Callable[[TickState], Awaitable[None] | None]


def build_frames(timers: list[Timer], now: datetime) -> list[TimerFrame]:
    """Evaluate each timer independently at ``now``."""
    frames = []
    for timer in timers:
        snapshot = evaluate(timer, now)
        frames.append(TimerFrame(timer, snapshot, present(timer, snapshot)))
    return frames


class CountdownTicker:
    def __init__(
        self,
        client: StorefrontClient,
        on_tick: RenderCallback,
        *,
        product_id: str | None = None,
        clock: Clock | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        tick_interval: float = TICK_INTERVAL,
        refresh_interval: float = REFRESH_INTERVAL,
    ) -> None:
        self.client = client
        self.on_tick = on_tick
        self.product_id = product_id
        self.clock = clock or SystemClock()
        self._sleep = sleep
        self.tick_interval = tick_interval
        self.refresh_interval = refresh_interval

        self.timers: list[Timer] = []
        self.error: str | None = None
        self.loaded = False
        self.ticks = 0
        self._next_refresh: datetime | None = None
        self._running = False

    def _refresh_due(self, now: datetime) -> bool:
        return self._next_refresh is None or now >= self._next_refresh

    async def refresh(self) -> None:
        """Reload timers; on failure keep the last list and record the error."""
        now = self.clock.now()
        self._next_refresh = now + timedelta(seconds=self.refresh_interval)
        try:
            self.timers = await self.client.fetch_active_timers(self.product_id)
            self.error = None
        except StorefrontError as e:
            self.error = str(e)
            logger.warning(f"Timer refresh failed: {e}")
        self.loaded = True

    async def tick(self) -> TickState:
        """Refresh if due, evaluate every timer and render once."""
        if self._refresh_due(self.clock.now()):
            await self.refresh()

        now = self.clock.now()
        state = TickState(
            now=now,
            frames=build_frames(self.timers, now),
            loading=not self.loaded,
            error=self.error,
        )
        self.ticks += 1

        result = self.on_tick(state)
        if inspect.isawaitable(result):
            await result
        return state

    async def run(self, max_ticks: int | None = None) -> None:
        """Tick until :meth:`stop` is called or ``max_ticks`` is reached."""
        self._running = True
        try:
            while self._running:
                await self.tick()
                if max_ticks is not None and self.ticks >= max_ticks:
                    break
                await self._sleep(self.tick_interval)
        finally:
            self._running = False

    def stop(self) -> None:
        self._running = False
