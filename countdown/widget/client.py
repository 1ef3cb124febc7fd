"""HTTP client for the public active-timer endpoint."""

from __future__ import annotations

import logging

import httpx

from countdown.shared.models.timer import Timer

logger = logging.getLogger(__name__)

ACTIVE_TIMERS_PATH = "/api/public/timers/active"


class StorefrontError(Exception):
    """A fetch failed; the message is suitable for showing inline."""


class StorefrontClient:
    """Fetches a shop's active timers the way the storefront widget does.

    Manages a shared httpx client for connection reuse across refreshes.
    """

    def __init__(
        self,
        api_url: str,
        shop: str,
        *,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not api_url or not shop:
            raise ValueError("api_url and shop are required")
        self.api_url = api_url.rstrip("/")
        self.shop = shop
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._http.aclose()

    async def fetch_active_timers(self, product_id: str | None = None) -> list[Timer]:
        """Active timers for the shop that apply to ``product_id``.

        Timers with no product targeting apply everywhere.
        """
        url = f"{self.api_url}{ACTIVE_TIMERS_PATH}"
        try:
            resp = await self._http.get(url, params={"shop": self.shop})
        except httpx.HTTPError as e:
            logger.warning(f"Fetching timers for {self.shop} failed: {e}")
            raise StorefrontError(f"Network error: {e}") from e

        if resp.status_code != 200:
            logger.warning(f"Fetching timers for {self.shop} returned {resp.status_code}")
            raise StorefrontError(f"HTTP error! status: {resp.status_code}")

        try:
            timers = [Timer.from_payload(item) for item in resp.json()]
        except (ValueError, KeyError, TypeError) as e:
            raise StorefrontError(f"Malformed timer data: {e}") from e

        matching = [t for t in timers if t.applies_to(product_id)]
        logger.debug(f"{len(matching)}/{len(timers)} timers apply to product {product_id}")
        return matching
