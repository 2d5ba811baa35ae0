"""Tests for the reconciliation reporter."""

from datetime import date, datetime

import pytest

from stockledger.core.entities.inventory import Customer, Product, Supplier
from stockledger.core.exceptions import InvalidPeriodError
from stockledger.core.services.ledger_store import LedgerSnapshot, LedgerStore
from stockledger.core.services.reconciliation import ReconciliationReporter, days_until_stockout


def _store(suppliers, products, transactions=(), customers=()) -> LedgerStore:
    return LedgerStore(
        LedgerSnapshot(
            suppliers=tuple(suppliers),
            products=tuple(products),
            transactions=tuple(transactions),
            customers=tuple(customers),
        )
    )


@pytest.fixture
def p100_store() -> LedgerStore:
    """P-100 starts March with 3 on the shelf and no ledger history."""
    store = _store(
        [Supplier(id="S-1", name="Tokyo Parts")],
        [Product(id="P-100", name="Gasket", supplier_id="S-1", unit_price=100, min_stock=5)],
    )
    store.set_stock("P-100", 3)
    store.adjust_stock("P-100", 10, "in", sub_type="purchase", date=datetime(2024, 3, 5, 10))
    store.adjust_stock("P-100", 8, "out", sub_type="usage", date=datetime(2024, 3, 20, 16))
    return store


class TestProductSummary:
    def test_end_to_end_drift(self, p100_store):
        """Physical count 5 vs ledger replay 2 reports a diff of 3."""
        [row] = ReconciliationReporter(p100_store).monthly_product_summary("2024-03")

        assert row.current_stock == 5
        assert row.total_purchases == 10
        assert row.total_usage == 8
        assert row.prev_month_stock == 0
        assert row.this_month_balance == 2
        assert row.diff == 3
        assert row.shortage == 0
        assert row.purchase_amount == 1000
        assert row.purchase_amount_with_tax == pytest.approx(1100)
        assert row.usage_amount == 800
        assert row.inventory_value == 500

    def test_weekly_and_daily_buckets(self, p100_store):
        [row] = ReconciliationReporter(p100_store).monthly_product_summary("2024-03")

        assert len(row.daily) == 31
        assert row.daily[4].purchases == 10  # March 5th
        assert row.daily[19].usage == 8
        assert sum(w.purchases for w in row.weekly) == 10
        assert sum(w.usage for w in row.weekly) == 8
        assert [w.label for w in row.weekly][:2] == ["3/1", "3/4"]

    def test_rows_for_other_months_are_quiet(self, p100_store):
        [row] = ReconciliationReporter(p100_store).monthly_product_summary("2024-04")
        assert row.total_purchases == 0
        assert row.prev_month_stock == 2
        assert row.this_month_balance == 2
        assert row.diff == 3

    def test_unknown_supplier_label(self):
        store = _store([], [Product(id="P-1", name="Bolt", supplier_id="S-X", unit_price=1)])
        [row] = ReconciliationReporter(store).monthly_product_summary("2024-03")
        assert row.supplier_name == "unknown"

    def test_claim_and_factory_quantities(self, make_txn):
        when = datetime(2024, 3, 12)
        store = _store(
            [Supplier(id="S-1", name="A")],
            [Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10)],
            [
                make_txn("P-1", "out", 2, when, "usage", note="クレーム交換"),
                make_txn("P-1", "out", 3, when, "adjustment", note="工場"),
            ],
        )
        [row] = ReconciliationReporter(store).monthly_product_summary("2024-03")
        assert (row.claim_qty, row.claim_amount) == (2, 20)
        assert (row.factory_qty, row.factory_amount) == (3, 30)
        # Factory use is an adjustment, so it does not reach the usage total
        assert row.total_usage == 2

    def test_customer_usage_per_product(self, make_txn):
        when = datetime(2024, 3, 12)
        store = _store(
            [Supplier(id="S-1", name="A")],
            [Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10)],
            [
                make_txn("P-1", "out", 2, when, "usage", customer_id="C-1"),
                make_txn("P-1", "out", 5, when, "usage", customer_id="C-1"),
            ],
        )
        [row] = ReconciliationReporter(store).monthly_product_summary("2024-03")
        assert [(c.customer_id, c.quantity, c.amount) for c in row.customer_usage] == [
            ("C-1", 7, 70)
        ]

    def test_tax_is_applied_as_a_rate(self, p100_store):
        [row] = ReconciliationReporter(p100_store, tax_rate=0.08).monthly_product_summary(
            "2024-03"
        )
        assert row.purchase_amount_with_tax == pytest.approx(1080)

    def test_last_representable_month(self, p100_store):
        [row] = ReconciliationReporter(p100_store).monthly_product_summary("9999-12")
        assert len(row.daily) == 31
        assert row.weekly[-1].label == "12/27"

    def test_invalid_period(self, p100_store):
        with pytest.raises(InvalidPeriodError):
            ReconciliationReporter(p100_store).monthly_product_summary("2024-13")


class TestSupplierSummary:
    def test_reconciliation_identity(self, make_txn):
        """Opening 1000, purchases 50 + 40, usage 30: change 60, closing 1060."""
        store = _store(
            [Supplier(id="S-1", name="A")],
            [
                Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10),
                Product(id="P-2", name="Nut", supplier_id="S-1", unit_price=20),
            ],
            [
                make_txn("P-1", "in", 100, datetime(2024, 2, 10), "purchase"),
                make_txn("P-1", "in", 5, datetime(2024, 3, 4), "purchase"),
                make_txn("P-2", "in", 2, datetime(2024, 3, 6), "purchase"),
                make_txn("P-1", "out", 3, datetime(2024, 3, 8), "usage"),
            ],
        )
        summary = ReconciliationReporter(store).supplier_monthly_summary("2024-03")
        [row] = summary.rows

        assert row.previous_balance == 1000
        assert row.monthly_purchase == 90
        assert row.monthly_usage == 30
        assert row.change == 60
        assert row.calculated_balance == 1060

    def test_previous_balance_is_cumulative_but_product_opening_is_not(self, make_txn):
        """Supplier opening replays all history; product opening replays last month only."""
        store = _store(
            [Supplier(id="S-1", name="A")],
            [Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10)],
            [
                make_txn("P-1", "in", 50, datetime(2024, 1, 15), "purchase"),
                make_txn("P-1", "in", 10, datetime(2024, 2, 15), "purchase"),
            ],
        )
        reporter = ReconciliationReporter(store)
        [product_row] = reporter.monthly_product_summary("2024-03")
        [supplier_row] = reporter.supplier_monthly_summary("2024-03").rows

        assert product_row.prev_month_stock == 10
        assert supplier_row.previous_balance == 600

    def test_stock_in_is_not_a_purchase(self, make_txn):
        store = _store(
            [Supplier(id="S-1", name="A")],
            [Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10)],
            [make_txn("P-1", "in", 4, datetime(2024, 3, 4), "stockIn")],
        )
        [row] = ReconciliationReporter(store).supplier_monthly_summary("2024-03").rows
        assert row.monthly_purchase == 0
        assert row.stock_in_purchase == 40
        assert row.change == 40

    def test_display_and_actual_stock_from_live_counts(self, stocked_store):
        summary = ReconciliationReporter(stocked_store).supplier_monthly_summary("2024-03")
        s1 = next(r for r in summary.rows if r.supplier_id == "S-1")
        assert s1.display_stock == 8 * 10 + 1 * 20
        assert s1.display_stock_qty == 9
        assert s1.actual_stock == s1.display_stock

    def test_supplier_without_products_is_excluded(self, store):
        store.upsert_supplier(Supplier(id="S-EMPTY", name="Nobody"))
        summary = ReconciliationReporter(store).supplier_monthly_summary("2024-03")
        assert "S-EMPTY" not in [r.supplier_id for r in summary.rows]
        assert [r.supplier_id for r in summary.rows] == ["S-1", "S-2"]

    def test_totals_are_fieldwise_sums(self, stocked_store, make_txn):
        stocked_store.adjust_stock("P-1", 2, "in", date=datetime(2024, 3, 2))
        stocked_store.adjust_stock("P-3", 4, "in", date=datetime(2024, 3, 2))
        summary = ReconciliationReporter(stocked_store).supplier_monthly_summary("2024-03")

        assert summary.totals.monthly_purchase == sum(r.monthly_purchase for r in summary.rows)
        assert summary.totals.display_stock == sum(r.display_stock for r in summary.rows)
        assert summary.totals.calculated_balance == sum(
            r.calculated_balance for r in summary.rows
        )

    def test_orphaned_entries_do_not_break_the_summary(self, store):
        store.adjust_stock("P-1", 5, "in", date=datetime(2024, 3, 3))
        store.delete_product("P-1")
        summary = ReconciliationReporter(store).supplier_monthly_summary("2024-03")
        s1 = next(r for r in summary.rows if r.supplier_id == "S-1")
        assert s1.monthly_purchase == 0


class TestShortages:
    @pytest.mark.parametrize("stock", range(0, 8))
    def test_shortage_is_monotonic(self, store, stock):
        """P-1 has min_stock 5: shortage shrinks as stock grows, zero from 5 up."""
        store.set_stock("P-1", stock)
        items = {i.product.id: i for i in ReconciliationReporter(store).shortage_items()}
        expected = max(0, 5 - stock)
        if expected == 0:
            assert "P-1" not in items
        else:
            assert items["P-1"].shortage == expected
            assert items["P-1"].order_amount == expected * 10

    def test_sorted_by_shortage(self, stocked_store):
        items = ReconciliationReporter(stocked_store).shortage_items()
        assert [i.product.id for i in items] == ["P-3", "P-2"]
        assert items[0].supplier_name == "Osaka Supply"

    def test_total_inventory_value(self, stocked_store):
        assert ReconciliationReporter(stocked_store).total_inventory_value() == 100

    def test_days_until_stockout_zero_guard(self):
        assert days_until_stockout(10, 0) is None
        assert days_until_stockout(10, 7) == 10


class TestReceiptsAndCustomers:
    def test_daily_receipts_grouped_by_supplier(self, store):
        day = datetime(2024, 3, 5, 9)
        store.adjust_stock("P-1", 4, "in", date=day)
        store.adjust_stock("P-2", 1, "in", date=day)
        store.adjust_stock("P-3", 10, "in", date=day)
        store.adjust_stock("P-1", 1, "in", date=datetime(2024, 3, 6))

        receipts = ReconciliationReporter(store).daily_receipt_summary(date(2024, 3, 5))
        by_supplier = {r.supplier_id: r for r in receipts}
        assert by_supplier["S-1"].total_quantity == 5
        assert by_supplier["S-1"].total_amount == 60
        assert by_supplier["S-2"].total_amount == 50

    def test_customer_usage_summary(self, store):
        store.upsert_customer(Customer(id="C-1", name="Sato"))
        when = datetime(2024, 3, 15)
        store.adjust_stock("P-1", 2, "out", sub_type="usage", customer_id="C-1", date=when)
        store.adjust_stock("P-2", 2, "out", sub_type="usage", customer_id="C-2", date=when)
        store.adjust_stock("GONE", 9, "out", sub_type="usage", customer_id="C-2", date=when)

        summaries = ReconciliationReporter(store).customer_usage_summary("2024-03")
        assert [s.customer_id for s in summaries] == ["C-2", "C-1"]
        assert summaries[0].customer_name == "unknown"
        assert summaries[0].total_amount == 40
        assert summaries[1].customer_name == "Sato"
