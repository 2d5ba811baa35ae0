"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import datetime

import pytest

from stockledger.application.services import reset_services
from stockledger.config import reset_settings
from stockledger.core.entities.inventory import (
    Product,
    Stock,
    Supplier,
    Transaction,
    TransactionSubType,
    TransactionType,
)
from stockledger.core.services.ledger_store import LedgerSnapshot, LedgerStore
from stockledger.infrastructure.llm import reset_llm_provider

_txn_counter = 0


def _make_txn(
    product_id: str,
    direction: str,
    quantity: int,
    when: datetime,
    sub_type: str | None = None,
    **fields,
) -> Transaction:
    """Build a ledger entry with a unique id."""
    global _txn_counter
    _txn_counter += 1
    return Transaction(
        id=f"txn-{_txn_counter}",
        product_id=product_id,
        type=TransactionType(direction),
        sub_type=TransactionSubType(sub_type) if sub_type else None,
        quantity=quantity,
        date=when,
        **fields,
    )


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """Fresh settings and singletons per test, with no API key and a temp data dir."""
    monkeypatch.setenv("LLM_API_KEY", "")
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_services()
    reset_llm_provider()
    yield
    reset_settings()
    reset_services()
    reset_llm_provider()


@pytest.fixture
def suppliers() -> list[Supplier]:
    return [
        Supplier(id="S-1", name="Tokyo Parts"),
        Supplier(id="S-2", name="Osaka Supply"),
    ]


@pytest.fixture
def products() -> list[Product]:
    return [
        Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10.0, min_stock=5),
        Product(id="P-2", name="Nut", supplier_id="S-1", unit_price=20.0, min_stock=2),
        Product(id="P-3", name="Washer", supplier_id="S-2", unit_price=5.0, min_stock=10),
    ]


@pytest.fixture
def store(suppliers, products) -> LedgerStore:
    """Store with suppliers and products but no stock or ledger entries."""
    return LedgerStore(LedgerSnapshot(suppliers=tuple(suppliers), products=tuple(products)))


@pytest.fixture
def stocked_store(store: LedgerStore) -> LedgerStore:
    store.import_data(
        stocks=[
            Stock(product_id="P-1", quantity=8),
            Stock(product_id="P-2", quantity=1),
            Stock(product_id="P-3", quantity=0),
        ]
    )
    return store


@pytest.fixture
def make_txn():
    """Factory for ledger entries: ``make_txn("P-1", "in", 5, when, "purchase")``."""
    return _make_txn
