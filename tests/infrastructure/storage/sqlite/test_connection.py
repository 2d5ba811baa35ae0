"""Tests for SQLite connection helpers."""

from pathlib import Path

import pytest

from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "ledger.db"


class TestGetConnection:
    async def test_creates_parent_directory(self, db_path):
        async with get_connection(db_path) as conn:
            await conn.execute("SELECT 1")
        assert db_path.parent.is_dir()

    async def test_wal_mode(self, db_path):
        async with get_connection(db_path) as conn:
            cursor = await conn.execute("PRAGMA journal_mode")
            row = await cursor.fetchone()
        assert row[0].lower() == "wal"

    async def test_rows_are_addressable_by_name(self, db_path):
        async with get_connection(db_path) as conn:
            cursor = await conn.execute("SELECT 7 AS answer")
            row = await cursor.fetchone()
        assert row["answer"] == 7

    async def test_defaults_to_configured_database(self, tmp_path):
        async with get_connection() as conn:
            await conn.execute("SELECT 1")
        assert (tmp_path / "data").is_dir()


class TestGetTransaction:
    async def test_commits_on_success(self, db_path):
        async with get_transaction(db_path) as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
            await conn.execute("INSERT INTO t VALUES (1)")

        async with get_connection(db_path) as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1

    async def test_rolls_back_on_error(self, db_path):
        async with get_transaction(db_path) as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        with pytest.raises(RuntimeError):
            async with get_transaction(db_path) as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("abort")

        async with get_connection(db_path) as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
