"""asyncpg pool owned by the API process."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import asyncpg

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    min_size: int = 1
    max_size: int = 10
    timeout: float = 10.0
    command_timeout: float = 15.0
    max_inactive_connection_lifetime: float = 300.0
    ssl: str = "prefer"
    # connect() tries this many times, doubling the delay after each failure
    max_retries: int = 3
    retry_delay: float = 2.0


class DatabaseManager:
    def __init__(self, database_url: str, config: PoolConfig | None = None):
        self.database_url = database_url
        self.config = config or PoolConfig()
        self._pool: asyncpg.Pool | None = None

    async def _open_pool(self) -> asyncpg.Pool:
        cfg = self.config
        pool = await asyncpg.create_pool(
            self.database_url,
            min_size=cfg.min_size,
            max_size=cfg.max_size,
            timeout=cfg.timeout,
            command_timeout=cfg.command_timeout,
            max_inactive_connection_lifetime=cfg.max_inactive_connection_lifetime,
            ssl=None if cfg.ssl == "disable" else cfg.ssl,
        )
        try:
            await pool.fetchval("SELECT 1")
        except BaseException:
            await pool.close()
            raise
        return pool

    async def connect(self) -> None:
        """Open the pool; gives up after ``max_retries`` failed attempts."""
        if self._pool is not None:
            return

        cfg = self.config
        delay = cfg.retry_delay
        for attempt in range(1, cfg.max_retries + 1):
            try:
                self._pool = await self._open_pool()
            except Exception as e:
                if attempt == cfg.max_retries:
                    logger.error(f"Could not connect to the database: {type(e).__name__}: {e}")
                    raise
                logger.warning(
                    f"Database connect {attempt}/{cfg.max_retries} failed ({e}), "
                    f"next try in {delay:.0f}s"
                )
                await asyncio.sleep(delay)
                delay *= 2
            else:
                logger.info(f"Database pool open ({cfg.min_size}..{cfg.max_size} connections)")
                return

    async def disconnect(self) -> None:
        pool, self._pool = self._pool, None
        if pool is not None:
            await pool.close()
            logger.info("Database pool closed")

    async def check_health(self) -> bool:
        if self._pool is None:
            return False
        try:
            await self._pool.fetchval("SELECT 1", timeout=2.0)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError):
            return False
        return True

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool is not open")
        return self._pool


_manager: DatabaseManager | None = None


def init_database_manager(database_url: str, config: PoolConfig | None = None) -> DatabaseManager:
    global _manager
    _manager = DatabaseManager(database_url, config)
    return _manager


def get_database_manager() -> DatabaseManager:
    if _manager is None:
        raise RuntimeError("init_database_manager() has not been called")
    return _manager
