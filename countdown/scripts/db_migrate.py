"""Apply the timers schema migrations.

Usage:
    python -m countdown.scripts.db_migrate           # apply pending migrations
    python -m countdown.scripts.db_migrate --dry     # list pending migrations only

Reads DATABASE_URL from the environment or ``.env`` in the working directory.
"""

import argparse
import asyncio
import logging
import os
import sys

import asyncpg
from dotenv import find_dotenv, load_dotenv

from countdown.shared.migrations.runner import MigrationRunner


async def migrate(database_url: str, dry_run: bool) -> int:
    pool = await asyncpg.create_pool(database_url, min_size=1, max_size=2)
    try:
        runner = MigrationRunner(pool)
        if not dry_run:
            applied = await runner.run_pending()
            print(f"{len(applied)} migration(s) applied" if applied else "Nothing to apply")
            return 0

        pending = await runner.pending()
        if not pending:
            print("Schema is current")
        for migration in pending:
            print(f"pending: {migration.name}")
        return 0
    finally:
        await pool.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dry", action="store_true", help="list pending migrations only")
    args = parser.parse_args(argv)

    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1
    return asyncio.run(migrate(database_url, args.dry))


if __name__ == "__main__":
    sys.exit(main())
