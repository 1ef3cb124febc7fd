"""Admin timer API routes."""

from __future__ import annotations

import logging

from asyncpg import Pool
from fastapi import APIRouter, Depends, HTTPException

from countdown.api.core.dependencies import get_clock, get_current_shop_id, get_db_pool
from countdown.api.routers.schemas import (
    ActivateBody,
    PreviewResponse,
    TimerBody,
    TimerResponse,
)
from countdown.api.services.timer_service import TimerService, TimerValidationError
from countdown.shared.clock import Clock

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/timers", tags=["timers"])

NOT_FOUND = "Timer not found"


def _validation_error(e: TimerValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": str(e), "errors": e.errors})


@router.get("", response_model=list[TimerResponse])
async def list_timers(
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
) -> list[TimerResponse]:
    """List the shop's timers, newest first."""
    timers = await TimerService(pool).list_timers(shop_id)
    return [TimerResponse.from_timer(t) for t in timers]


@router.post("", response_model=TimerResponse, status_code=201)
async def create_timer(
    body: TimerBody,
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
) -> TimerResponse:
    try:
        timer = await TimerService(pool).create_timer(shop_id, body.to_draft())
    except TimerValidationError as e:
        raise _validation_error(e) from e
    return TimerResponse.from_timer(timer)


@router.get("/{timer_id}", response_model=TimerResponse)
async def get_timer(
    timer_id: str,
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
) -> TimerResponse:
    timer = await TimerService(pool).get_timer(shop_id, timer_id)
    if timer is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return TimerResponse.from_timer(timer)


@router.put("/{timer_id}", response_model=TimerResponse)
async def update_timer(
    timer_id: str,
    body: TimerBody,
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
) -> TimerResponse:
    try:
        timer = await TimerService(pool).update_timer(shop_id, timer_id, body.to_draft())
    except TimerValidationError as e:
        raise _validation_error(e) from e
    if timer is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return TimerResponse.from_timer(timer)


@router.delete("/{timer_id}", status_code=204)
async def delete_timer(
    timer_id: str,
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
) -> None:
    deleted = await TimerService(pool).delete_timer(shop_id, timer_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND)


@router.post("/{timer_id}/activate", response_model=TimerResponse)
async def set_timer_active(
    timer_id: str,
    body: ActivateBody,
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
) -> TimerResponse:
    """Switch a timer on or off."""
    timer = await TimerService(pool).set_active(shop_id, timer_id, body.active)
    if timer is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return TimerResponse.from_timer(timer)


@router.get("/{timer_id}/preview", response_model=PreviewResponse)
async def preview_timer(
    timer_id: str,
    shop_id: str = Depends(get_current_shop_id),
    pool: Pool = Depends(get_db_pool),
    clock: Clock = Depends(get_clock),
) -> PreviewResponse:
    """Evaluate a stored timer at server time, as the storefront would render it."""
    service = TimerService(pool, clock=clock)
    timer = await service.get_timer(shop_id, timer_id)
    if timer is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    evaluated_at, _, view = service.preview(timer)
    return PreviewResponse.build(timer, evaluated_at, view)
