"""Repository for the timers table."""

from __future__ import annotations

import json
import logging
import uuid

import asyncpg

from countdown.shared.cache import AsyncTTLCache, cached
from countdown.shared.models.timer import Timer, TimerDraft

logger = logging.getLogger(__name__)

# Storefront lookups: one entry per shop
active_timer_cache = AsyncTTLCache(maxsize=256, ttl=30)

_COLUMNS = (
    "id, shop_id, title, start_time, end_time, duration, loop, hide_after_completion, "
    "before_message, after_message, style, urgency_settings, product_ids, collection_ids, "
    "active, created_at, updated_at"
)


def _active_key(shop_id: str) -> str:
    return f"active_timers:{shop_id}"


def _as_uuid(timer_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(timer_id))
    except ValueError:
        return None


def _draft_params(draft: TimerDraft) -> tuple:
    return (
        draft.title,
        draft.start_time,
        draft.end_time,
        draft.duration,
        draft.loop,
        draft.hide_after_completion,
        draft.before_message,
        draft.after_message,
        json.dumps(draft.style.to_dict()),
        json.dumps(draft.urgency_settings.to_dict()),
        list(draft.product_ids),
        list(draft.collection_ids),
        draft.active,
    )


class TimerRepository:
    """SQL operations for timers, always scoped to a shop."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def list_for_shop(self, shop_id: str) -> list[Timer]:
        """All timers of a shop, newest first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM timers WHERE shop_id = $1 ORDER BY created_at DESC",
                shop_id,
            )
            return [Timer.from_record(row) for row in rows]

    async def get(self, shop_id: str, timer_id: str) -> Timer | None:
        key = _as_uuid(timer_id)
        if key is None:
            return None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM timers WHERE id = $1 AND shop_id = $2",
                key,
                shop_id,
            )
            return Timer.from_record(row) if row else None

    async def create(self, shop_id: str, draft: TimerDraft) -> Timer:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO timers (
                    shop_id, title, start_time, end_time, duration, loop,
                    hide_after_completion, before_message, after_message,
                    style, urgency_settings, product_ids, collection_ids, active
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10::jsonb, $11::jsonb, $12, $13, $14)
                RETURNING {_COLUMNS}
                """,
                shop_id,
                *_draft_params(draft),
            )
        self.invalidate_cache(shop_id)
        return Timer.from_record(row)

    async def update(self, shop_id: str, timer_id: str, draft: TimerDraft) -> Timer | None:
        """Replace a timer's editable fields. Returns None if not owned by the shop."""
        key = _as_uuid(timer_id)
        if key is None:
            return None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE timers SET
                    title = $3,
                    start_time = $4,
                    end_time = $5,
                    duration = $6,
                    loop = $7,
                    hide_after_completion = $8,
                    before_message = $9,
                    after_message = $10,
                    style = $11::jsonb,
                    urgency_settings = $12::jsonb,
                    product_ids = $13,
                    collection_ids = $14,
                    active = $15,
                    updated_at = NOW()
                WHERE id = $1 AND shop_id = $2
                RETURNING {_COLUMNS}
                """,
                key,
                shop_id,
                *_draft_params(draft),
            )
        self.invalidate_cache(shop_id)
        return Timer.from_record(row) if row else None

    async def set_active(self, shop_id: str, timer_id: str, active: bool) -> Timer | None:
        key = _as_uuid(timer_id)
        if key is None:
            return None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE timers SET active = $3, updated_at = NOW()
                WHERE id = $1 AND shop_id = $2
                RETURNING {_COLUMNS}
                """,
                key,
                shop_id,
                active,
            )
        self.invalidate_cache(shop_id)
        return Timer.from_record(row) if row else None

    async def delete(self, shop_id: str, timer_id: str) -> bool:
        """Delete a timer. Returns True if a row was removed."""
        key = _as_uuid(timer_id)
        if key is None:
            return False
        async with self.pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM timers WHERE id = $1 AND shop_id = $2",
                key,
                shop_id,
            )
        self.invalidate_cache(shop_id)
        return result == "DELETE 1"

    @cached(cache=active_timer_cache, key_func=lambda self, shop_id: _active_key(shop_id))
    async def list_active(self, shop_id: str) -> list[Timer]:
        """Enabled timers whose end time is unset or still ahead, newest first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_COLUMNS} FROM timers
                WHERE shop_id = $1 AND active = TRUE
                  AND (end_time IS NULL OR end_time > NOW())
                ORDER BY created_at DESC
                """,
                shop_id,
            )
            return [Timer.from_record(row) for row in rows]

    def invalidate_cache(self, shop_id: str) -> None:
        active_timer_cache.invalidate(_active_key(shop_id))
