"""Short-lived cache for storefront timer lists.

Every storefront page view asks for a shop's active timers, so loaded lists
are kept in a ``cachetools.TTLCache`` for a few seconds. The last list loaded
for each key is also remembered past its TTL and served when the database
cannot be reached, so countdowns keep rendering through an outage.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from typing import Any

from cachetools import TTLCache  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

# Returned on a miss; a cached empty list is a hit
MISS = object()


class AsyncTTLCache:
    """Fresh entries expire after *ttl* seconds; last-known values are kept
    for the *maxsize* most recently used keys."""

    def __init__(self, maxsize: int = 128, ttl: float = 30.0):
        self.maxsize = maxsize
        self._fresh: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)
        self._last_known: OrderedDict[str, Any] = OrderedDict()
        self._loading: dict[str, asyncio.Lock] = {}

    def lock_for(self, key: str) -> asyncio.Lock:
        """Per-key lock so concurrent misses trigger a single load."""
        lock = self._loading.get(key)
        if lock is not None:
            return lock
        if len(self._loading) >= self.maxsize * 2:
            for idle in [k for k, v in self._loading.items() if not v.locked()]:
                del self._loading[idle]
        lock = self._loading[key] = asyncio.Lock()
        return lock

    def get(self, key: str) -> Any:
        return self._fresh.get(key, MISS)

    def put(self, key: str, value: Any) -> None:
        self._fresh[key] = value
        self._last_known.pop(key, None)
        self._last_known[key] = value
        if len(self._last_known) > self.maxsize:
            self._last_known.popitem(last=False)

    def invalidate(self, key: str) -> None:
        """Expire the fresh entry now. The last-known value is kept."""
        self._fresh.pop(key, None)

    def clear(self) -> None:
        self._fresh.clear()

    def set_ttl(self, ttl: float) -> None:
        self._fresh = TTLCache(maxsize=self.maxsize, ttl=ttl)

    def get_stale(self, key: str) -> Any:
        if key not in self._last_known:
            return MISS
        self._last_known.move_to_end(key)
        return self._last_known[key]

    def __len__(self) -> int:
        return len(self._fresh)


async def _load(
    func: Callable[..., Awaitable[Any]],
    args: tuple,
    kwargs: dict,
    *,
    key: str,
    attempts: int,
    delay: float,
) -> Any:
    attempt = 1
    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            if attempt >= attempts:
                raise
            logger.warning(
                f"Loading {key} failed ({type(exc).__name__}), attempt {attempt}/{attempts}"
            )
            await asyncio.sleep(delay * attempt)
            attempt += 1


def cached(
    cache: AsyncTTLCache,
    key_func: Callable[..., str],
    *,
    retry: int = 2,
    retry_delay: float = 0.5,
):
    """Cache an async loader under ``key_func(*args, **kwargs)``.

    A miss runs the loader up to *retry* times. When every attempt fails the
    last-known value is returned if there is one; otherwise the error propagates.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = key_func(*args, **kwargs)
            hit = cache.get(key)
            if hit is not MISS:
                return hit

            async with cache.lock_for(key):
                hit = cache.get(key)
                if hit is not MISS:
                    return hit
                try:
                    value = await _load(
                        func, args, kwargs, key=key, attempts=retry, delay=retry_delay
                    )
                except Exception as exc:
                    stale = cache.get_stale(key)
                    if stale is MISS:
                        raise
                    logger.warning(f"Serving last known {key} after {type(exc).__name__}")
                    return stale
                cache.put(key, value)
                return value

        return wrapper

    return decorator
