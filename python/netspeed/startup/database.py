"""Database startup helpers: Alembic migrations.

Migrations run synchronously in a threadpool so they do not block the FastAPI
event loop.  They are designed to be invoked from an ``async`` context like::

    await apply_migrations(database)
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from netspeed.db import Database

__all__ = ["apply_migrations", "apply_migrations_sync", "MIGRATIONS_DIR"]

log = logging.getLogger(__name__)

MIGRATIONS_DIR: Path = Path(__file__).resolve().parent.parent / "alembic"


async def apply_migrations(database: Database) -> None:
    """Apply Alembic migrations in a background thread."""

    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, apply_migrations_sync, database)


def apply_migrations_sync(database: Database, revision: str = "head") -> None:
    start = time.time()
    from alembic import command  # local import – heavy
    from alembic.config import Config

    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", database.url.replace("%", "%%"))
    try:
        # Share the application's engine so migrations hit the same database
        with database.engine.begin() as connection:
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, revision)
    except Exception:
        elapsed = time.time() - start
        log.critical("=" * 80)
        log.critical("DATABASE MIGRATION FAILED - APPLICATION CANNOT START")
        log.critical("Database: %s", database.url)
        log.critical("=" * 80)
        log.exception("[MIGRATION] Failed after %.3fs", elapsed)
        raise
    log.info("[MIGRATION] Completed in %.3fs", time.time() - start)
