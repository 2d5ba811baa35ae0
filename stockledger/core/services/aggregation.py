"""
Aggregation engine.

One fold over transaction slices, reused at every granularity (day, week,
month) and for every grouping key (product, supplier, customer). All
functions are pure: they read the transactions they are given and keep no
state between calls.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TypeVar

from stockledger.core.entities.inventory import (
    Transaction,
    TransactionSubType,
    TransactionType,
)
from stockledger.core.services.periods import PeriodWindow, to_local

K = TypeVar("K", bound=Hashable)

PriceLookup = Callable[[str], float]


class Classification(str, Enum):
    """Which rollup bucket a ledger entry counts towards."""

    PURCHASE = "purchase"
    STOCK_IN = "stock_in"
    USAGE = "usage"
    IGNORED = "ignored"


def classify(txn: Transaction) -> Classification:
    """
    Classify a transaction for the monetary rollups.

    ``in`` entries are purchases unless tagged ``stockIn``; ``out`` entries
    only count when tagged ``usage``. Everything else is ignored.
    """
    if txn.type == TransactionType.IN:
        if txn.sub_type == TransactionSubType.STOCK_IN:
            return Classification.STOCK_IN
        return Classification.PURCHASE
    if txn.sub_type == TransactionSubType.USAGE:
        return Classification.USAGE
    return Classification.IGNORED


@dataclass(frozen=True)
class QuantityTotals:
    """Summed quantities per classification."""

    purchases: int = 0
    stock_in: int = 0
    usage: int = 0

    @property
    def subtotal(self) -> int:
        return self.purchases + self.stock_in - self.usage

    def __add__(self, other: QuantityTotals) -> QuantityTotals:
        return QuantityTotals(
            purchases=self.purchases + other.purchases,
            stock_in=self.stock_in + other.stock_in,
            usage=self.usage + other.usage,
        )


@dataclass(frozen=True)
class AmountTotals:
    """Summed currency amounts per classification."""

    purchases: float = 0.0
    stock_in: float = 0.0
    usage: float = 0.0

    @property
    def change(self) -> float:
        return self.purchases + self.stock_in - self.usage

    def __add__(self, other: AmountTotals) -> AmountTotals:
        return AmountTotals(
            purchases=self.purchases + other.purchases,
            stock_in=self.stock_in + other.stock_in,
            usage=self.usage + other.usage,
        )


def constant_price(unit_price: float) -> PriceLookup:
    return lambda _product_id: unit_price


def _as_lookup(price: float | PriceLookup) -> PriceLookup:
    if callable(price):
        return price
    return constant_price(float(price))


def select(
    transactions: Iterable[Transaction],
    *,
    product_ids: Iterable[str] | None = None,
    period: PeriodWindow | None = None,
    until: datetime | None = None,
) -> list[Transaction]:
    """Filter a slice by product membership, window and inclusive cutoff."""
    wanted = set(product_ids) if product_ids is not None else None
    cutoff = to_local(until) if until is not None else None

    selected = []
    for txn in transactions:
        if wanted is not None and txn.product_id not in wanted:
            continue
        if period is not None and not period.contains(txn.date):
            continue
        if cutoff is not None and to_local(txn.date) > cutoff:
            continue
        selected.append(txn)
    return selected


def aggregate(
    transactions: Iterable[Transaction],
    period: PeriodWindow | None = None,
) -> QuantityTotals:
    """Sum quantities per classification, optionally within ``period``."""
    purchases = stock_in = usage = 0
    for txn in transactions:
        if period is not None and not period.contains(txn.date):
            continue
        kind = classify(txn)
        if kind is Classification.PURCHASE:
            purchases += txn.quantity
        elif kind is Classification.STOCK_IN:
            stock_in += txn.quantity
        elif kind is Classification.USAGE:
            usage += txn.quantity
    return QuantityTotals(purchases=purchases, stock_in=stock_in, usage=usage)


def aggregate_buckets(
    transactions: Iterable[Transaction],
    windows: Sequence[PeriodWindow],
) -> list[QuantityTotals]:
    """Fold the same slice once per window, in window order."""
    materialised = list(transactions)
    return [aggregate(materialised, window) for window in windows]


def aggregate_by(
    transactions: Iterable[Transaction],
    key: Callable[[Transaction], K | None],
    period: PeriodWindow | None = None,
) -> dict[K, QuantityTotals]:
    """
    Group a slice by ``key`` and fold each group.

    Transactions whose key is ``None`` are left out. Groups keep the order in
    which their first transaction was seen.
    """
    groups: dict[K, list[Transaction]] = {}
    for txn in transactions:
        group = key(txn)
        if group is None:
            continue
        groups.setdefault(group, []).append(txn)
    return {group: aggregate(txns, period) for group, txns in groups.items()}


def monetize(totals: QuantityTotals, unit_price: float) -> AmountTotals:
    """Price a single product's quantity totals."""
    return AmountTotals(
        purchases=totals.purchases * unit_price,
        stock_in=totals.stock_in * unit_price,
        usage=totals.usage * unit_price,
    )


def aggregate_amounts(
    transactions: Iterable[Transaction],
    price: float | PriceLookup,
    period: PeriodWindow | None = None,
) -> AmountTotals:
    """
    Sum amounts per classification.

    Each transaction is priced with its own product's price before summing,
    so prices are never averaged across products. Unknown products price at
    whatever the lookup returns for them (0 for a snapshot lookup).
    """
    price_of = _as_lookup(price)
    purchases = stock_in = usage = 0.0
    for txn in transactions:
        if period is not None and not period.contains(txn.date):
            continue
        kind = classify(txn)
        if kind is Classification.IGNORED:
            continue
        amount = txn.quantity * price_of(txn.product_id)
        if kind is Classification.PURCHASE:
            purchases += amount
        elif kind is Classification.STOCK_IN:
            stock_in += amount
        else:
            usage += amount
    return AmountTotals(purchases=purchases, stock_in=stock_in, usage=usage)


def previous_balance(
    transactions: Iterable[Transaction],
    price: float | PriceLookup,
    cutoff: datetime | None = None,
) -> float:
    """
    Signed currency balance replayed over the full history up to ``cutoff``.

    ``in`` adds ``quantity * price`` and ``out`` subtracts it, whatever the
    subtype. The cutoff is inclusive. Recomputed from scratch on every call.
    """
    price_of = _as_lookup(price)
    limit = to_local(cutoff) if cutoff is not None else None
    balance = 0.0
    for txn in transactions:
        if limit is not None and to_local(txn.date) > limit:
            continue
        balance += txn.signed_quantity * price_of(txn.product_id)
    return balance


def quantity_balance(
    transactions: Iterable[Transaction],
    period: PeriodWindow | None = None,
) -> int:
    """Signed quantity replay (in minus out), optionally within ``period``."""
    return sum(
        txn.signed_quantity
        for txn in transactions
        if period is None or period.contains(txn.date)
    )
