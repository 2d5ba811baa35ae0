"""
Async SQLite connections with aiosqlite.

The ledger is written as whole snapshots, so each operation opens its own
connection rather than borrowing from a pool.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)


async def _create_connection(db_path: Path, busy_timeout: int) -> aiosqlite.Connection:
    """Create a new database connection with optimized settings."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = await aiosqlite.connect(db_path)

    # WAL keeps readers unblocked while a snapshot is written
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA synchronous=NORMAL")
    await conn.execute(f"PRAGMA busy_timeout={busy_timeout}")

    conn.row_factory = aiosqlite.Row
    return conn


@asynccontextmanager
async def get_connection(db_path: Path | None = None) -> AsyncIterator[aiosqlite.Connection]:
    """
    Open a connection to ``db_path`` (defaults to the configured database).

    Usage:
        async with get_connection() as conn:
            await conn.execute(...)
    """
    settings = get_settings().storage
    conn = await _create_connection(db_path or settings.db_path, settings.busy_timeout)
    try:
        yield conn
    finally:
        await conn.close()


@asynccontextmanager
async def get_transaction(db_path: Path | None = None) -> AsyncIterator[aiosqlite.Connection]:
    """
    Connection with transaction context.

    Commits on success, rolls back on exception.
    """
    async with get_connection(db_path) as conn:
        try:
            yield conn
            await conn.commit()
        except Exception:
            await conn.rollback()
            logger.warning("sqlite_transaction_rolled_back", db_path=str(db_path))
            raise
