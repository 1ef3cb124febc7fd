"""FastAPI application factory"""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

import asyncpg
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from countdown import __version__
from countdown.api.core.config import Settings, get_settings
from countdown.api.core.logging import setup_logging
from countdown.api.routers import public_router, system_router, timers_router
from countdown.shared.database import DatabaseManager, PoolConfig, init_database_manager
from countdown.shared.migrations.runner import MigrationRunner
from countdown.shared.repositories.timer import active_timer_cache

logger = logging.getLogger(__name__)

STARTUP_DB_TIMEOUT = 30
RETRY_DELAY_MAX = 60


async def _bring_up_database(db: DatabaseManager, settings: Settings) -> None:
    await db.connect()
    if not settings.run_migrations:
        return
    try:
        await MigrationRunner(db.pool).run_pending()
    except BaseException:
        # an unmigrated schema counts as not ready
        await db.disconnect()
        raise


async def _keep_trying(db: DatabaseManager, settings: Settings) -> None:
    """Retry the database in the background until it comes up."""
    delay = 5
    while not db.is_connected:
        await asyncio.sleep(delay)
        try:
            await _bring_up_database(db, settings)
        except Exception as e:
            delay = min(delay * 2, RETRY_DELAY_MAX)
            logger.warning(
                f"Database still unavailable ({type(e).__name__}: {e}), retry in {delay}s"
            )
        else:
            logger.info("Database connected after startup")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    app.state.started_at = time.monotonic()
    logger.info(f"Countdown timer API starting ({settings.environment})")

    active_timer_cache.set_ttl(settings.public_cache_ttl)
    db = init_database_manager(settings.database_url, PoolConfig(ssl=settings.database_ssl))

    # Requests that arrive before the pool exists get 503 from get_db_pool
    retry_task = None
    try:
        await asyncio.wait_for(_bring_up_database(db, settings), timeout=STARTUP_DB_TIMEOUT)
    except Exception as e:
        logger.error(f"Database not ready at startup ({type(e).__name__}: {e})")
        retry_task = asyncio.create_task(_keep_trying(db, settings))

    yield

    if retry_task is not None:
        retry_task.cancel()
        with suppress(asyncio.CancelledError):
            await retry_task
    await db.disconnect()
    logger.info("Countdown timer API stopped")


async def _storage_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} failed in storage: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Storage error, please try again"})


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Countdown Timer API",
        description="Admin and storefront API for merchant countdown timers",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for exc_type in (asyncpg.PostgresError, asyncpg.InterfaceError):
        app.add_exception_handler(exc_type, _storage_error)

    for module in (timers_router, public_router, system_router):
        app.include_router(module.router)
    return app
