"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    IN = "in"
    OUT = "out"


class TransactionSubType(str, Enum):
    """Finer tagging of a ledger entry."""

    PURCHASE = "purchase"
    STOCK_IN = "stockIn"  # reconciliation receipt, not a purchase
    USAGE = "usage"
    ADJUSTMENT = "adjustment"


class Supplier(BaseModel):
    """A vendor owning zero or more products."""

    id: str
    name: str


class Product(BaseModel):
    """A stocked item bought from exactly one supplier."""

    id: str  # part number, doubles as lookup key
    name: str
    supplier_id: str
    unit_price: float = Field(default=0.0, ge=0)
    min_stock: int = 0  # reorder threshold
    ideal_stock: int | None = None
    reorder_qty: int | None = None
    lead_days: int | None = None
    lot: str | None = None
    category: str | None = None
    barcode: str | None = None


class Stock(BaseModel):
    """Physical count for one product, maintained apart from the ledger."""

    product_id: str
    quantity: int = 0
    last_updated: datetime = Field(default_factory=datetime.now)
    last_ordered_at: datetime | None = None


class Customer(BaseModel):
    """End customer that usage can be booked against."""

    id: str
    name: str
    furigana: str | None = None
    phone: str | None = None
    note: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class Transaction(BaseModel):
    """Immutable ledger entry. Never edited or deleted once appended."""

    model_config = ConfigDict(frozen=True)

    id: str
    product_id: str
    type: TransactionType
    sub_type: TransactionSubType | None = None
    quantity: int  # always positive; direction comes from `type`
    date: datetime
    customer_id: str | None = None
    operator: str | None = None
    note: str | None = None

    @property
    def signed_quantity(self) -> int:
        """Quantity with the sign of its direction."""
        return self.quantity if self.type == TransactionType.IN else -self.quantity
