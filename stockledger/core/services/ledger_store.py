"""
Ledger store.

Owns the entity tables (suppliers, products, stocks, customers) and the
append-only transaction ledger. Readers work on immutable snapshots; every
mutation goes through a method here and runs under a single lock.
"""

from __future__ import annotations

import threading
import time
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property

from stockledger.config import get_logger
from stockledger.core.entities.inventory import (
    Customer,
    Product,
    Stock,
    Supplier,
    Transaction,
    TransactionSubType,
    TransactionType,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time, read-only view of every table.

    ``transactions`` are newest-first (insertion order reversed).
    """

    suppliers: tuple[Supplier, ...] = ()
    products: tuple[Product, ...] = ()
    stocks: tuple[Stock, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    customers: tuple[Customer, ...] = ()
    taken_at: datetime = field(default_factory=datetime.now)

    @cached_property
    def product_map(self) -> dict[str, Product]:
        return {p.id: p for p in self.products}

    @cached_property
    def supplier_map(self) -> dict[str, Supplier]:
        return {s.id: s for s in self.suppliers}

    @cached_property
    def stock_map(self) -> dict[str, Stock]:
        return {s.product_id: s for s in self.stocks}

    @cached_property
    def customer_map(self) -> dict[str, Customer]:
        return {c.id: c for c in self.customers}

    def get_stock(self, product_id: str) -> int:
        stock = self.stock_map.get(product_id)
        return stock.quantity if stock else 0

    def price_of(self, product_id: str) -> float:
        """Unit price, or 0 for a product that no longer exists."""
        product = self.product_map.get(product_id)
        return product.unit_price if product else 0.0

    def products_by_supplier(self) -> dict[str, list[Product]]:
        grouped: dict[str, list[Product]] = {}
        for product in self.products:
            grouped.setdefault(product.supplier_id, []).append(product)
        return grouped

    def transactions_for(self, product_ids: Iterable[str]) -> list[Transaction]:
        wanted = set(product_ids)
        return [t for t in self.transactions if t.product_id in wanted]


def new_transaction_id() -> str:
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def new_customer_id() -> str:
    return f"C-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class LedgerStore:
    """In-memory owner of the inventory tables."""

    def __init__(self, snapshot: LedgerSnapshot | None = None):
        self._lock = threading.RLock()
        self._revision = 0
        self._suppliers: list[Supplier] = []
        self._products: list[Product] = []
        self._stocks: dict[str, Stock] = {}
        self._transactions: list[Transaction] = []
        self._customers: list[Customer] = []
        if snapshot is not None:
            self.restore(snapshot)

    @property
    def revision(self) -> int:
        """Bumped on every mutation."""
        return self._revision

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                suppliers=tuple(self._suppliers),
                products=tuple(self._products),
                stocks=tuple(self._stocks.values()),
                transactions=tuple(self._transactions),
                customers=tuple(self._customers),
            )

    def restore(self, snapshot: LedgerSnapshot) -> None:
        """Replace every table with the contents of ``snapshot``."""
        with self._lock:
            self._suppliers = list(snapshot.suppliers)
            self._products = list(snapshot.products)
            self._stocks = {s.product_id: s for s in snapshot.stocks}
            self._transactions = list(snapshot.transactions)
            self._customers = list(snapshot.customers)
            self._revision += 1
        logger.info(
            "ledger_restored",
            suppliers=len(snapshot.suppliers),
            products=len(snapshot.products),
            transactions=len(snapshot.transactions),
        )

    # Suppliers

    def upsert_supplier(self, supplier: Supplier) -> None:
        with self._lock:
            self._suppliers = _upsert(self._suppliers, supplier)
            self._revision += 1

    # Products

    def upsert_product(self, product: Product) -> None:
        with self._lock:
            self._products = _upsert(self._products, product)
            self._revision += 1

    def update_product(self, product_id: str, **updates: object) -> Product | None:
        """Patch fields of an existing product. Unknown ids are a no-op."""
        with self._lock:
            current = self.get_product(product_id)
            if current is None:
                return None
            updated = current.model_copy(update=updates)
            self._products = _upsert(self._products, updated)
            self._revision += 1
            return updated

    def delete_product(self, product_id: str) -> None:
        """Drop a product and its stock row. Its transactions stay in the ledger."""
        with self._lock:
            self._products = [p for p in self._products if p.id != product_id]
            self._stocks.pop(product_id, None)
            self._revision += 1
        logger.info("product_deleted", product_id=product_id)

    def get_product(self, product_id: str) -> Product | None:
        with self._lock:
            return next((p for p in self._products if p.id == product_id), None)

    def get_product_by_barcode(self, barcode: str) -> Product | None:
        with self._lock:
            return next((p for p in self._products if p.barcode == barcode), None)

    # Stock

    def get_stock(self, product_id: str) -> int:
        with self._lock:
            stock = self._stocks.get(product_id)
            return stock.quantity if stock else 0

    def set_stock(self, product_id: str, quantity: int) -> Stock:
        """Overwrite the physical count without touching the ledger."""
        with self._lock:
            stock = self._stock_row(product_id, quantity, datetime.now())
            self._stocks[product_id] = stock
            self._revision += 1
            return stock

    def adjust_stock(
        self,
        product_id: str,
        quantity: int,
        direction: TransactionType | str,
        *,
        sub_type: TransactionSubType | str | None = None,
        customer_id: str | None = None,
        operator: str | None = None,
        note: str | None = None,
        date: datetime | None = None,
    ) -> Transaction:
        """
        Move stock and append the matching ledger entry as one operation.

        The count is clamped at 0 on the way down. The new stock row and the
        new transaction are both built before either is committed.
        """
        direction = TransactionType(direction)
        now = datetime.now()

        with self._lock:
            current = self.get_stock(product_id)
            if direction == TransactionType.IN:
                new_quantity = current + quantity
            else:
                new_quantity = max(0, current - quantity)

            stock = self._stock_row(product_id, new_quantity, now)
            txn = Transaction(
                id=new_transaction_id(),
                product_id=product_id,
                type=direction,
                sub_type=TransactionSubType(sub_type) if sub_type else None,
                quantity=quantity,
                date=date or now,
                customer_id=customer_id,
                operator=operator,
                note=note,
            )

            self._stocks[product_id] = stock
            self._transactions.insert(0, txn)
            self._revision += 1

        logger.info(
            "stock_adjusted",
            product_id=product_id,
            direction=direction.value,
            sub_type=txn.sub_type.value if txn.sub_type else None,
            quantity=quantity,
            previous=current,
            current=new_quantity,
            transaction_id=txn.id,
        )
        return txn

    def record_order_date(
        self, product_ids: Iterable[str], at: datetime | None = None
    ) -> None:
        """Stamp ``last_ordered_at`` on existing stock rows."""
        at = at or datetime.now()
        wanted = set(product_ids)
        with self._lock:
            for product_id in wanted & self._stocks.keys():
                self._stocks[product_id] = self._stocks[product_id].model_copy(
                    update={"last_ordered_at": at}
                )
            self._revision += 1

    # Customers

    def add_customer(self, name: str, **fields: object) -> Customer:
        customer = Customer(id=new_customer_id(), name=name, **fields)
        with self._lock:
            self._customers.append(customer)
            self._revision += 1
        return customer

    def upsert_customer(self, customer: Customer) -> None:
        with self._lock:
            self._customers = _upsert(self._customers, customer)
            self._revision += 1

    # Bulk

    def import_data(
        self,
        suppliers: Iterable[Supplier] = (),
        products: Iterable[Product] = (),
        stocks: Iterable[Stock] = (),
    ) -> None:
        with self._lock:
            for supplier in suppliers:
                self.upsert_supplier(supplier)
            for product in products:
                self.upsert_product(product)
            for stock in stocks:
                self.set_stock(stock.product_id, stock.quantity)

    def clear_all(self) -> None:
        """Wipe every table, ledger included."""
        with self._lock:
            self._suppliers = []
            self._products = []
            self._stocks = {}
            self._transactions = []
            self._customers = []
            self._revision += 1
        logger.warning("ledger_cleared")

    def _stock_row(self, product_id: str, quantity: int, at: datetime) -> Stock:
        existing = self._stocks.get(product_id)
        if existing is None:
            return Stock(product_id=product_id, quantity=quantity, last_updated=at)
        return existing.model_copy(update={"quantity": quantity, "last_updated": at})


def _upsert(rows: list, row) -> list:
    """Replace the row with the same id in place, or append it."""
    if any(r.id == row.id for r in rows):
        return [row if r.id == row.id else r for r in rows]
    return [*rows, row]
