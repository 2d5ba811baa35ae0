"""Generate Report Use Case: monthly narrative from the supplier rollup."""

from stockledger.config import get_logger
from stockledger.core.entities.forecast import InventoryReport
from stockledger.core.services.ledger_store import LedgerStore
from stockledger.core.services.reconciliation import ReconciliationReporter
from stockledger.core.services.report_generator import InventoryReportService

logger = get_logger(__name__)


class GenerateReportUseCase:
    """Gather the month's figures and hand them to the report service."""

    def __init__(
        self,
        store: LedgerStore | None = None,
        reporter: ReconciliationReporter | None = None,
        report_service: InventoryReportService | None = None,
    ):
        from stockledger.application import services

        self._store = store or services.get_ledger_store()
        self._reporter = reporter or services.get_reconciliation_reporter(store)
        self._report_service = report_service or services.get_inventory_report_service()

    async def execute(self, year_month: str) -> InventoryReport:
        supplier_summary = self._reporter.supplier_monthly_summary(year_month)
        shortages = self._reporter.shortage_items()
        snapshot = self._store.snapshot()

        report = await self._report_service.generate(
            supplier_summary.year_month,
            supplier_summary,
            snapshot.transactions,
            snapshot.products,
            total_inventory_value=self._reporter.total_inventory_value(),
            shortage_count=len(shortages),
        )
        logger.info(
            "report_complete",
            year_month=supplier_summary.year_month,
            generated_by_ai=report.generated_by_ai,
        )
        return report
