"""Liveness and readiness probes."""

import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from countdown import __version__
from countdown.api.core.config import get_settings
from countdown.shared.database import get_database_manager

router = APIRouter(tags=["system"])


def _uptime(request: Request) -> int:
    started = getattr(request.app.state, "started_at", None)
    return int(time.monotonic() - started) if started is not None else 0


@router.get("/health")
async def health(request: Request) -> dict:
    """Process is up; does not touch the database."""
    return {"status": "healthy", "uptime_seconds": _uptime(request)}


@router.get("/status")
async def status(request: Request) -> dict:
    try:
        db_connected = await get_database_manager().check_health()
    except RuntimeError:
        db_connected = False
    return {
        "service": "countdown-timer-api",
        "version": __version__,
        "environment": get_settings().environment,
        "uptime_seconds": _uptime(request),
        "db_connected": db_connected,
    }


@router.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
async def ping() -> str:
    return "pong"
