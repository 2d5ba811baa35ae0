"""SQLite implementation of ledger snapshot persistence."""

from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from stockledger.config import get_logger
from stockledger.core.entities.inventory import Customer, Product, Stock, Supplier, Transaction
from stockledger.core.exceptions import CorruptSnapshotError, DatabaseError
from stockledger.core.interfaces.ledger_persistence import STORAGE_KEYS, ILedgerPersistence
from stockledger.core.services.ledger_store import LedgerSnapshot
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS ledger_tables (
    storage_key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "suppliers": TypeAdapter(list[Supplier]),
    "products": TypeAdapter(list[Product]),
    "stocks": TypeAdapter(list[Stock]),
    "transactions": TypeAdapter(list[Transaction]),
    "customers": TypeAdapter(list[Customer]),
}


class SQLiteLedgerPersistence(ILedgerPersistence):
    """
    Stores each ledger table as one JSON document keyed by its storage key.

    A save rewrites all five documents in a single transaction, so a reader
    never sees a half-written snapshot.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(SCHEMA)

    async def load(self) -> LedgerSnapshot:
        try:
            async with get_connection(self.db_path) as conn:
                await self._ensure_schema(conn)
                cursor = await conn.execute("SELECT storage_key, payload FROM ledger_tables")
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("load", str(e))

        payloads = {row["storage_key"]: row["payload"] for row in rows}
        tables: dict[str, tuple] = {}
        for table, storage_key in STORAGE_KEYS.items():
            raw = payloads.get(storage_key)
            if raw is None:
                tables[table] = ()
                continue
            try:
                tables[table] = tuple(_ADAPTERS[table].validate_json(raw))
            except PydanticValidationError as e:
                logger.error("ledger_table_corrupt", storage_key=storage_key, errors=e.error_count())
                raise CorruptSnapshotError(storage_key, str(e))

        snapshot = LedgerSnapshot(**tables)
        logger.info(
            "ledger_loaded",
            suppliers=len(snapshot.suppliers),
            products=len(snapshot.products),
            transactions=len(snapshot.transactions),
        )
        return snapshot

    async def save(self, snapshot: LedgerSnapshot) -> None:
        now = datetime.now().isoformat()
        rows = [
            (
                storage_key,
                _ADAPTERS[table].dump_json(list(getattr(snapshot, table))).decode(),
                now,
            )
            for table, storage_key in STORAGE_KEYS.items()
        ]
        try:
            async with get_transaction(self.db_path) as conn:
                await self._ensure_schema(conn)
                await conn.executemany(
                    """
                    INSERT INTO ledger_tables (storage_key, payload, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(storage_key) DO UPDATE SET
                        payload = excluded.payload,
                        updated_at = excluded.updated_at
                    """,
                    rows,
                )
        except aiosqlite.Error as e:
            raise DatabaseError("save", str(e))

        logger.info(
            "ledger_saved",
            products=len(snapshot.products),
            transactions=len(snapshot.transactions),
        )


_persistence: SQLiteLedgerPersistence | None = None


def get_ledger_persistence() -> SQLiteLedgerPersistence:
    """Get singleton ledger persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SQLiteLedgerPersistence()
    return _persistence
