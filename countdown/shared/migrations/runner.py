"""Forward-only SQL migrations for the timers schema."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

import asyncpg

logger = logging.getLogger(__name__)

VERSIONS_DIR = Path(__file__).resolve().parent / "versions"

_CREATE_TRACKING = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version    TEXT PRIMARY KEY,
    name       TEXT NOT NULL,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""
_RECORD = "INSERT INTO schema_migrations (version, name) VALUES ($1, $2)"


class Migration(NamedTuple):
    version: str  # file stem, e.g. "001_create_timers"
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


def discover(directory: Path) -> list[Migration]:
    """``NNN_*.sql`` files in apply order."""
    return [Migration(p.stem, p) for p in sorted(directory.glob("*.sql"))]


class MigrationRunner:
    def __init__(self, pool: asyncpg.Pool, migrations_dir: Path | None = None) -> None:
        self.pool = pool
        self.migrations_dir = migrations_dir or VERSIONS_DIR

    async def pending(self) -> list[Migration]:
        async with self.pool.acquire() as conn:
            await conn.execute(_CREATE_TRACKING)
            rows = await conn.fetch("SELECT version FROM schema_migrations")
        done = {r["version"] for r in rows}
        return [m for m in discover(self.migrations_dir) if m.version not in done]

    async def run_pending(self) -> list[str]:
        """Apply each pending file in its own transaction; return their versions."""
        applied = []
        for migration in await self.pending():
            logger.info(f"Applying migration {migration.version}")
            sql = migration.path.read_text(encoding="utf-8")
            async with self.pool.acquire() as conn:
                async with conn.transaction():
                    await conn.execute(sql)
                    await conn.execute(_RECORD, migration.version, migration.name)
            applied.append(migration.version)

        if applied:
            logger.info(f"Schema migrated: {', '.join(applied)}")
        else:
            logger.debug("Schema already current")
        return applied
