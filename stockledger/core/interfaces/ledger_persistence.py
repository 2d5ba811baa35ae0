"""Abstract interface for ledger persistence."""

from abc import ABC, abstractmethod

from stockledger.core.services.ledger_store import LedgerSnapshot

# Fixed storage identifiers, one per table
STORAGE_KEYS: dict[str, str] = {
    "suppliers": "inventory_suppliers",
    "products": "inventory_products",
    "stocks": "inventory_stocks",
    "transactions": "inventory_transactions",
    "customers": "inventory_customers",
}


class ILedgerPersistence(ABC):
    """Loads and saves whole ledger snapshots."""

    @abstractmethod
    async def load(self) -> LedgerSnapshot:
        """Load every table; missing tables come back empty."""
        pass

    @abstractmethod
    async def save(self, snapshot: LedgerSnapshot) -> None:
        """Persist every table of ``snapshot`` atomically."""
        pass
