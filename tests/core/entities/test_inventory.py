"""Tests for inventory entities."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from stockledger.core.entities.inventory import (
    Product,
    Transaction,
    TransactionSubType,
    TransactionType,
)


def _txn(direction: TransactionType, quantity: int = 4) -> Transaction:
    return Transaction(
        id="t-1",
        product_id="P-1",
        type=direction,
        quantity=quantity,
        date=datetime(2024, 3, 1),
    )


class TestTransaction:
    def test_signed_quantity_in(self):
        assert _txn(TransactionType.IN).signed_quantity == 4

    def test_signed_quantity_out(self):
        assert _txn(TransactionType.OUT).signed_quantity == -4

    def test_is_immutable(self):
        txn = _txn(TransactionType.IN)
        with pytest.raises(ValidationError):
            txn.quantity = 10

    def test_subtype_values(self):
        """Subtypes round-trip through their stored string values."""
        txn = Transaction.model_validate(
            {
                "id": "t-2",
                "product_id": "P-1",
                "type": "in",
                "sub_type": "stockIn",
                "quantity": 1,
                "date": "2024-03-01T09:00:00",
            }
        )
        assert txn.sub_type is TransactionSubType.STOCK_IN
        assert txn.model_dump(mode="json")["sub_type"] == "stockIn"


class TestProduct:
    def test_defaults(self):
        product = Product(id="P-1", name="Bolt", supplier_id="S-1")
        assert product.unit_price == 0.0
        assert product.min_stock == 0
        assert product.lead_days is None

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=-1)

