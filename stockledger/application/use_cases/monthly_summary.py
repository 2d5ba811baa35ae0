"""Read-side use case for the reconciliation reports."""

from datetime import date

from stockledger.application.dto.responses import (
    CustomerSummaryResponse,
    ProductSummaryResponse,
    ReceiptSummaryResponse,
    ShortageResponse,
)
from stockledger.core.entities.summary import SupplierMonthlySummary
from stockledger.core.services.periods import format_year_month, parse_year_month
from stockledger.core.services.reconciliation import ReconciliationReporter


class MonthlySummaryUseCase:
    """Thin wrapper turning reporter output into API envelopes."""

    def __init__(self, reporter: ReconciliationReporter | None = None):
        self._reporter = reporter

    def _get_reporter(self) -> ReconciliationReporter:
        if self._reporter is None:
            from stockledger.application.services import get_reconciliation_reporter

            self._reporter = get_reconciliation_reporter()
        return self._reporter

    def products(self, year_month: str) -> ProductSummaryResponse:
        rows = self._get_reporter().monthly_product_summary(year_month)
        return ProductSummaryResponse(
            year_month=format_year_month(*parse_year_month(year_month)),
            rows=rows,
        )

    def suppliers(self, year_month: str) -> SupplierMonthlySummary:
        return self._get_reporter().supplier_monthly_summary(year_month)

    def shortages(self) -> ShortageResponse:
        reporter = self._get_reporter()
        items = reporter.shortage_items()
        return ShortageResponse(
            items=items,
            total_order_amount=sum(item.order_amount for item in items),
            total_inventory_value=reporter.total_inventory_value(),
        )

    def receipts(self, day: date) -> ReceiptSummaryResponse:
        return ReceiptSummaryResponse(
            day=day,
            suppliers=self._get_reporter().daily_receipt_summary(day),
        )

    def customers(self, year_month: str) -> CustomerSummaryResponse:
        return CustomerSummaryResponse(
            year_month=format_year_month(*parse_year_month(year_month)),
            customers=self._get_reporter().customer_usage_summary(year_month),
        )
