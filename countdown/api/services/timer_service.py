"""Business logic for countdown timers: validation, CRUD and previews."""

from __future__ import annotations

import logging
import re
from datetime import datetime

import asyncpg

from countdown.shared.clock import Clock, SystemClock
from countdown.shared.countdown import Snapshot, evaluate
from countdown.shared.models.timer import Timer, TimerDraft
from countdown.shared.presentation import PresentationView, present
from countdown.shared.repositories.timer import TimerRepository

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
MIN_TRIGGER_MINUTES = 1
MAX_TRIGGER_MINUTES = 60

WINDOW_REQUIRED = "Either end time or duration must be specified"


class TimerValidationError(ValueError):
    """Raised with a field -> message map when a draft is rejected."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Timer validation failed")
        self.errors = errors


def validate_draft(draft: TimerDraft) -> dict[str, str]:
    """Return field-level errors for a draft (empty when valid)."""
    errors: dict[str, str] = {}

    if not draft.title or not draft.title.strip():
        errors["title"] = "Title is required"

    if draft.end_time is None and draft.duration is None:
        errors["endTime"] = WINDOW_REQUIRED
        errors["duration"] = WINDOW_REQUIRED

    if draft.duration is not None and draft.duration < 1:
        errors["duration"] = "Duration must be at least 1 minute"

    if draft.start_time and draft.end_time and draft.end_time <= draft.start_time:
        errors["endTime"] = "End time must be after start time"

    for field_name, color in (
        ("backgroundColor", draft.style.background_color),
        ("textColor", draft.style.text_color),
    ):
        if not HEX_COLOR_RE.match(color):
            errors[field_name] = "Color must be a valid hex color (e.g., #000000)"

    urgency = draft.urgency_settings
    if urgency.enabled:
        if not MIN_TRIGGER_MINUTES <= urgency.trigger_minutes <= MAX_TRIGGER_MINUTES:
            errors["urgencyTrigger"] = (
                f"Trigger minutes must be between {MIN_TRIGGER_MINUTES} and {MAX_TRIGGER_MINUTES}"
            )
        if not HEX_COLOR_RE.match(urgency.pulse_color):
            errors["urgencyColor"] = "Pulse color must be a valid hex color (e.g., #ff0000)"
        if urgency.show_banner and not urgency.banner_message.strip():
            errors["urgencyBanner"] = "Banner message is required when banner is enabled"

    return errors


class TimerService:
    def __init__(self, pool: asyncpg.Pool, clock: Clock | None = None) -> None:
        self.pool = pool
        self.repo = TimerRepository(pool)
        self.clock = clock or SystemClock()

    async def list_timers(self, shop_id: str) -> list[Timer]:
        return await self.repo.list_for_shop(shop_id)

    async def get_timer(self, shop_id: str, timer_id: str) -> Timer | None:
        return await self.repo.get(shop_id, timer_id)

    async def create_timer(self, shop_id: str, draft: TimerDraft) -> Timer:
        errors = validate_draft(draft)
        if errors:
            raise TimerValidationError(errors)
        timer = await self.repo.create(shop_id, draft)
        logger.info(f"Timer {timer.id} created for {shop_id}")
        return timer

    async def update_timer(self, shop_id: str, timer_id: str, draft: TimerDraft) -> Timer | None:
        errors = validate_draft(draft)
        if errors:
            raise TimerValidationError(errors)
        timer = await self.repo.update(shop_id, timer_id, draft)
        if timer:
            logger.info(f"Timer {timer_id} updated for {shop_id}")
        return timer

    async def set_active(self, shop_id: str, timer_id: str, active: bool) -> Timer | None:
        return await self.repo.set_active(shop_id, timer_id, active)

    async def delete_timer(self, shop_id: str, timer_id: str) -> bool:
        deleted = await self.repo.delete(shop_id, timer_id)
        if deleted:
            logger.info(f"Timer {timer_id} deleted for {shop_id}")
        return deleted

    async def list_active_timers(self, shop_id: str, product_id: str | None = None) -> list[Timer]:
        """Timers a storefront should show, optionally narrowed to one product."""
        timers = await self.repo.list_active(shop_id)
        if product_id is None:
            return list(timers)
        return [t for t in timers if t.applies_to(product_id)]

    def preview(
        self, timer: Timer, now: datetime | None = None
    ) -> tuple[datetime, Snapshot, PresentationView]:
        """Evaluate a timer as the storefront would see it right now."""
        now = now or self.clock.now()
        snapshot = evaluate(timer, now)
        return now, snapshot, present(timer, snapshot)
