"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.ledger_persistence import (
    SQLiteLedgerPersistence,
    get_ledger_persistence,
)

__all__ = [
    # Connection
    "get_connection",
    "get_transaction",
    # Stores
    "SQLiteLedgerPersistence",
    "get_ledger_persistence",
]
