"""
Reconciliation reporter.

Builds the monthly per-product and per-supplier rows from a ledger snapshot
and the live stock table, and surfaces the gap between the physical count
and the ledger replay as ``diff``. The gap is reported, never corrected.

Previous balances are deliberately computed two different ways:

- per product, ``prev_month_stock`` replays the previous month only
  (month-over-month flow);
- per supplier, ``previous_balance`` replays the whole history up to the end
  of the previous month (absolute running ledger).
"""

from __future__ import annotations

import math
from datetime import date

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.inventory import Product, Transaction, TransactionType
from stockledger.core.entities.summary import (
    BucketQuantities,
    CustomerUsage,
    CustomerUsageSummary,
    DailyReceiptSummary,
    LineItem,
    ProductSummaryRow,
    ShortageItem,
    SupplierMonthlySummary,
    SupplierSummaryRow,
    SupplierTotals,
)
from stockledger.core.services.aggregation import (
    Classification,
    QuantityTotals,
    aggregate,
    aggregate_amounts,
    aggregate_buckets,
    aggregate_by,
    classify,
    monetize,
    previous_balance,
    quantity_balance,
    select,
)
from stockledger.core.services.ledger_store import LedgerSnapshot, LedgerStore
from stockledger.core.services.note_rules import (
    CLAIM_TAG,
    FACTORY_TAG,
    NoteClassifier,
    default_note_classifier,
)
from stockledger.core.services.periods import (
    PeriodWindow,
    day_buckets,
    format_year_month,
    local_day,
    month_bounds,
    parse_year_month,
    previous_month_bounds,
    week_buckets,
)

logger = get_logger(__name__)


def days_until_stockout(current_stock: int, avg_weekly_usage: float) -> int | None:
    """Whole days of cover left, or ``None`` when nothing is being used."""
    if avg_weekly_usage <= 0:
        return None
    return math.floor(current_stock * 7 / avg_weekly_usage)


def _bucket(window: PeriodWindow, totals: QuantityTotals) -> BucketQuantities:
    return BucketQuantities(
        label=window.label,
        first_day=window.first_day,
        last_day=window.last_day,
        purchases=totals.purchases,
        stock_in=totals.stock_in,
        usage=totals.usage,
        subtotal=totals.subtotal,
    )


def _by_product(transactions: list[Transaction]) -> dict[str, list[Transaction]]:
    grouped: dict[str, list[Transaction]] = {}
    for txn in transactions:
        grouped.setdefault(txn.product_id, []).append(txn)
    return grouped


class ReconciliationReporter:
    """
    Read-only reporting over a :class:`LedgerStore`.

    Every call takes a fresh snapshot and keeps all intermediate state local,
    so concurrent calls for different months never interfere.
    """

    def __init__(
        self,
        store: LedgerStore,
        note_classifier: NoteClassifier | None = None,
        unknown_label: str | None = None,
        tax_rate: float | None = None,
    ) -> None:
        settings = get_settings().reconcile
        self._store = store
        self._notes = note_classifier or default_note_classifier()
        self._unknown = unknown_label if unknown_label is not None else settings.unknown_label
        self._tax_rate = tax_rate if tax_rate is not None else settings.tax_rate

    def _supplier_name(self, snapshot: LedgerSnapshot, supplier_id: str) -> str:
        supplier = snapshot.supplier_map.get(supplier_id)
        return supplier.name if supplier else self._unknown

    # Per product

    def monthly_product_summary(self, year_month: str) -> list[ProductSummaryRow]:
        """One row per current product for ``YYYY-MM``."""
        year, month = parse_year_month(year_month)
        label = format_year_month(year, month)
        snapshot = self._store.snapshot()

        month_window = month_bounds(year, month)
        prev_window = previous_month_bounds(year, month)
        weeks = week_buckets(year, month)
        days = day_buckets(year, month)

        month_txns = _by_product(select(snapshot.transactions, period=month_window))
        prev_txns = _by_product(select(snapshot.transactions, period=prev_window))

        rows = [
            self._product_row(
                snapshot,
                product,
                label,
                month_txns.get(product.id, []),
                prev_txns.get(product.id, []),
                weeks,
                days,
            )
            for product in snapshot.products
        ]

        logger.info(
            "product_summary_built",
            year_month=label,
            rows=len(rows),
            drifted=sum(1 for r in rows if r.diff != 0),
        )
        return rows

    def _product_row(
        self,
        snapshot: LedgerSnapshot,
        product: Product,
        year_month: str,
        txns: list[Transaction],
        prev_txns: list[Transaction],
        weeks: list[PeriodWindow],
        days: list[PeriodWindow],
    ) -> ProductSummaryRow:
        price = product.unit_price
        current_stock = snapshot.get_stock(product.id)
        prev_month_stock = quantity_balance(prev_txns)

        totals = aggregate(txns)
        amounts = monetize(totals, price)

        weekly = [_bucket(w, t) for w, t in zip(weeks, aggregate_buckets(txns, weeks))]
        daily = [_bucket(d, t) for d, t in zip(days, aggregate_buckets(txns, days))]

        per_customer = aggregate_by(
            txns,
            key=lambda t: t.customer_id if classify(t) is Classification.USAGE else None,
        )
        customer_usage = [
            CustomerUsage(
                customer_id=customer_id,
                quantity=usage.usage,
                amount=usage.usage * price,
            )
            for customer_id, usage in per_customer.items()
        ]

        tagged = self._notes.tagged_quantities(txns)
        claim_qty = tagged.get(CLAIM_TAG, 0)
        factory_qty = tagged.get(FACTORY_TAG, 0)

        this_month_balance = prev_month_stock + totals.subtotal
        shortage = max(0, product.min_stock - current_stock)

        return ProductSummaryRow(
            product_id=product.id,
            product_name=product.name,
            supplier_id=product.supplier_id,
            supplier_name=self._supplier_name(snapshot, product.supplier_id),
            year_month=year_month,
            unit_price=price,
            min_stock=product.min_stock,
            prev_month_stock=prev_month_stock,
            current_stock=current_stock,
            weekly=weekly,
            daily=daily,
            total_purchases=totals.purchases,
            total_stock_in=totals.stock_in,
            total_usage=totals.usage,
            customer_usage=customer_usage,
            claim_qty=claim_qty,
            claim_amount=claim_qty * price,
            factory_qty=factory_qty,
            factory_amount=factory_qty * price,
            tagged_quantities=tagged,
            this_month_balance=this_month_balance,
            diff=current_stock - this_month_balance,
            shortage=shortage,
            order_amount=shortage * price,
            inventory_value=current_stock * price,
            prev_inventory_value=prev_month_stock * price,
            purchase_amount=amounts.purchases,
            purchase_amount_with_tax=amounts.purchases * (1 + self._tax_rate),
            usage_amount=amounts.usage,
        )

    # Per supplier

    def supplier_monthly_summary(self, year_month: str) -> SupplierMonthlySummary:
        """Supplier rows for ``YYYY-MM`` plus a field-wise totals row.

        Suppliers without products are left out entirely.
        """
        year, month = parse_year_month(year_month)
        label = format_year_month(year, month)
        snapshot = self._store.snapshot()

        month_window = month_bounds(year, month)
        prev_end = previous_month_bounds(year, month).end
        grouped = snapshot.products_by_supplier()

        rows: list[SupplierSummaryRow] = []
        for supplier in snapshot.suppliers:
            products = grouped.get(supplier.id, [])
            if not products:
                continue

            txns = snapshot.transactions_for(p.id for p in products)
            opening = previous_balance(txns, snapshot.price_of, cutoff=prev_end)
            amounts = aggregate_amounts(txns, snapshot.price_of, period=month_window)
            change = amounts.change

            display_qty = sum(snapshot.get_stock(p.id) for p in products)
            display_stock = sum(snapshot.get_stock(p.id) * p.unit_price for p in products)
            # TODO: subtract manual count adjustments once they are recorded
            actual_stock = display_stock

            rows.append(
                SupplierSummaryRow(
                    supplier_id=supplier.id,
                    supplier_name=supplier.name,
                    year_month=label,
                    product_count=len(products),
                    previous_balance=opening,
                    monthly_purchase=amounts.purchases,
                    monthly_usage=amounts.usage,
                    stock_in_purchase=amounts.stock_in,
                    change=change,
                    calculated_balance=opening + change,
                    display_stock=display_stock,
                    display_stock_qty=display_qty,
                    actual_stock=actual_stock,
                )
            )

        totals = SupplierTotals()
        for row in rows:
            totals = totals + row.totals()

        logger.info("supplier_summary_built", year_month=label, rows=len(rows))
        return SupplierMonthlySummary(year_month=label, rows=rows, totals=totals)

    # Shortages and value

    def shortage_items(self) -> list[ShortageItem]:
        """Products below ``min_stock``, largest shortage first."""
        snapshot = self._store.snapshot()
        items = []
        for product in snapshot.products:
            current = snapshot.get_stock(product.id)
            if current < product.min_stock:
                shortage = product.min_stock - current
                items.append(
                    ShortageItem(
                        product=product,
                        current_stock=current,
                        shortage=shortage,
                        supplier_name=self._supplier_name(snapshot, product.supplier_id),
                        order_amount=shortage * product.unit_price,
                    )
                )
        items.sort(key=lambda item: item.shortage, reverse=True)
        return items

    def total_inventory_value(self) -> float:
        snapshot = self._store.snapshot()
        return sum(snapshot.get_stock(p.id) * p.unit_price for p in snapshot.products)

    # Receipts and customers

    def daily_receipt_summary(self, day: date) -> list[DailyReceiptSummary]:
        """Incoming goods for one local day, grouped by supplier."""
        snapshot = self._store.snapshot()

        by_supplier: dict[str, list[LineItem]] = {}
        for txn in snapshot.transactions:
            if txn.type != TransactionType.IN or local_day(txn.date) != day:
                continue
            product = snapshot.product_map.get(txn.product_id)
            if product is None:
                continue
            by_supplier.setdefault(product.supplier_id, []).append(
                LineItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=txn.quantity,
                    unit_price=product.unit_price,
                    amount=txn.quantity * product.unit_price,
                    date=txn.date,
                )
            )

        return [
            DailyReceiptSummary(
                date=day,
                supplier_id=supplier_id,
                supplier_name=self._supplier_name(snapshot, supplier_id),
                total_quantity=sum(i.quantity for i in items),
                total_amount=sum(i.amount for i in items),
                items=items,
            )
            for supplier_id, items in by_supplier.items()
        ]

    def customer_usage_summary(self, year_month: str) -> list[CustomerUsageSummary]:
        """Usage per customer for ``YYYY-MM``, biggest spender first."""
        year, month = parse_year_month(year_month)
        label = format_year_month(year, month)
        snapshot = self._store.snapshot()
        window = month_bounds(year, month)

        by_customer: dict[str, list[LineItem]] = {}
        for txn in select(snapshot.transactions, period=window):
            if classify(txn) is not Classification.USAGE or not txn.customer_id:
                continue
            product = snapshot.product_map.get(txn.product_id)
            unit_price = product.unit_price if product else 0.0
            by_customer.setdefault(txn.customer_id, []).append(
                LineItem(
                    product_id=txn.product_id,
                    product_name=product.name if product else self._unknown,
                    quantity=txn.quantity,
                    unit_price=unit_price,
                    amount=txn.quantity * unit_price,
                    date=txn.date,
                )
            )

        summaries = []
        for customer_id, items in by_customer.items():
            customer = snapshot.customer_map.get(customer_id)
            summaries.append(
                CustomerUsageSummary(
                    customer_id=customer_id,
                    customer_name=customer.name if customer else self._unknown,
                    year_month=label,
                    total_amount=sum(i.amount for i in items),
                    items=items,
                )
            )
        summaries.sort(key=lambda s: s.total_amount, reverse=True)
        return summaries
