"""Storage infrastructure implementations."""

from stockledger.infrastructure.storage.sqlite import (
    SQLiteLedgerPersistence,
    get_connection,
    get_ledger_persistence,
    get_transaction,
)

__all__ = [
    "SQLiteLedgerPersistence",
    "get_ledger_persistence",
    "get_connection",
    "get_transaction",
]
