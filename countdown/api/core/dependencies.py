"""Dependency injection utilities for FastAPI"""

import logging

import asyncpg
from fastapi import Header, HTTPException

from countdown.api.core.config import get_settings
from countdown.api.services import AuthService
from countdown.shared.clock import Clock, SystemClock
from countdown.shared.database import get_database_manager

logger = logging.getLogger(__name__)

_system_clock = SystemClock()


# ============================================
# Service Dependencies
# ============================================


def get_auth_service() -> AuthService:
    settings = get_settings()
    return AuthService(
        api_key=settings.shopify_api_key,
        api_secret=settings.shopify_api_secret,
    )


def get_db_pool() -> asyncpg.Pool:
    db_manager = get_database_manager()
    if not db_manager.is_connected:
        raise HTTPException(status_code=503, detail="Database not ready")
    return db_manager.pool


def get_clock() -> Clock:
    """Clock used for previews; overridden with a fixed clock in tests"""
    return _system_clock


# ============================================
# Authentication Dependencies
# ============================================


async def get_current_shop_id(
    authorization: str | None = Header(None),
) -> str:
    """Return the shop the admin session token was issued for"""
    if not authorization:
        logger.warning("No session token provided")
        raise HTTPException(status_code=401, detail="Not logged in")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    shop_id = get_auth_service().verify_session_token(token)
    if not shop_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return shop_id
