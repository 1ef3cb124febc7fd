"""Unauthenticated storefront routes."""

import logging

from asyncpg import Pool
from fastapi import APIRouter, Depends, HTTPException, Query

from countdown.api.core.dependencies import get_db_pool
from countdown.api.routers.schemas import TimerResponse
from countdown.api.services.timer_service import TimerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/timers/active", response_model=list[TimerResponse])
async def list_active_timers(
    shop: list[str] | None = Query(None),
    product: str | None = Query(None),
    pool: Pool = Depends(get_db_pool),
) -> list[TimerResponse]:
    """Enabled timers for a shop whose end time is unset or still ahead.

    ``product`` narrows the list to timers targeting that product or every product.
    """
    shop_id = shop[0] if shop else None
    if not shop_id:
        raise HTTPException(status_code=400, detail="Shop parameter is required")

    try:
        timers = await TimerService(pool).list_active_timers(shop_id, product)
    except Exception as e:
        logger.exception(f"Failed to fetch active timers for {shop_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch active timers") from None
    return [TimerResponse.from_timer(t) for t in timers]
