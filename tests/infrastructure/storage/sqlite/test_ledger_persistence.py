"""Tests for SQLiteLedgerPersistence."""

from datetime import datetime
from pathlib import Path

import aiosqlite
import pytest

from stockledger.core.entities.inventory import Customer
from stockledger.core.exceptions import CorruptSnapshotError
from stockledger.core.interfaces.ledger_persistence import STORAGE_KEYS
from stockledger.core.services.ledger_store import LedgerStore
from stockledger.infrastructure.storage.sqlite.ledger_persistence import SQLiteLedgerPersistence


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "ledger.db"


@pytest.fixture
def persistence(temp_db_path: Path) -> SQLiteLedgerPersistence:
    return SQLiteLedgerPersistence(db_path=temp_db_path)


class TestSQLiteLedgerPersistence:
    async def test_load_empty_database(self, persistence):
        """A fresh database loads as an empty snapshot."""
        snapshot = await persistence.load()
        assert snapshot.products == ()
        assert snapshot.transactions == ()

    async def test_save_then_load(self, persistence, stocked_store: LedgerStore):
        stocked_store.adjust_stock(
            "P-1", 4, "out", sub_type="usage", customer_id="C-1", date=datetime(2024, 3, 5, 9)
        )
        stocked_store.adjust_stock("P-2", 6, "in", sub_type="stockIn")
        stocked_store.upsert_customer(Customer(id="C-1", name="Sato"))
        original = stocked_store.snapshot()

        await persistence.save(original)
        loaded = await persistence.load()

        assert loaded.suppliers == original.suppliers
        assert loaded.products == original.products
        assert loaded.stocks == original.stocks
        assert loaded.customers == original.customers
        # Newest-first order survives
        assert [t.id for t in loaded.transactions] == [t.id for t in original.transactions]
        assert loaded.transactions[1].date == datetime(2024, 3, 5, 9)

    async def test_save_overwrites(self, persistence, store: LedgerStore):
        await persistence.save(store.snapshot())
        store.delete_product("P-3")
        await persistence.save(store.snapshot())

        loaded = await persistence.load()
        assert [p.id for p in loaded.products] == ["P-1", "P-2"]

    async def test_one_row_per_storage_key(self, persistence, temp_db_path, store):
        await persistence.save(store.snapshot())

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT storage_key FROM ledger_tables ORDER BY storage_key")
            keys = [row[0] for row in await cursor.fetchall()]

        assert keys == sorted(STORAGE_KEYS.values())

    async def test_corrupt_table_raises(self, persistence, temp_db_path):
        await persistence.load()  # creates the schema
        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute(
                "INSERT INTO ledger_tables (storage_key, payload, updated_at) VALUES (?, ?, ?)",
                ("inventory_products", '[{"id": 1}]', "2024-03-01T00:00:00"),
            )
            await conn.commit()

        with pytest.raises(CorruptSnapshotError) as exc_info:
            await persistence.load()
        assert exc_info.value.code == "CORRUPT_SNAPSHOT"
