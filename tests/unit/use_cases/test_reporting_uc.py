"""Tests for the summary, forecast and report use cases."""

from datetime import date, datetime
from unittest.mock import AsyncMock

from stockledger.application.dto.requests import ForecastRequest
from stockledger.application.use_cases import (
    ForecastDemandUseCase,
    GenerateReportUseCase,
    MonthlySummaryUseCase,
)
from stockledger.core.entities.forecast import InventoryReport
from stockledger.core.services.demand_forecast import DemandForecastService
from stockledger.core.services.reconciliation import ReconciliationReporter
from stockledger.core.services.report_generator import InventoryReportService


class TestMonthlySummaryUseCase:
    def test_products_normalises_month_label(self, stocked_store):
        use_case = MonthlySummaryUseCase(ReconciliationReporter(stocked_store))
        response = use_case.products("2024-3")
        assert response.year_month == "2024-03"
        assert len(response.rows) == 3

    def test_shortages_envelope(self, stocked_store):
        response = MonthlySummaryUseCase(ReconciliationReporter(stocked_store)).shortages()
        assert [i.product.id for i in response.items] == ["P-3", "P-2"]
        assert response.total_order_amount == 10 * 5 + 1 * 20
        assert response.total_inventory_value == 100

    def test_receipts_and_customers(self, store):
        store.adjust_stock("P-1", 2, "in", date=datetime(2024, 3, 5))
        use_case = MonthlySummaryUseCase(ReconciliationReporter(store))
        assert use_case.receipts(date(2024, 3, 5)).suppliers[0].total_quantity == 2
        assert use_case.customers("2024-03").customers == []


class TestForecastDemandUseCase:
    async def test_filters_by_supplier(self, stocked_store):
        service = DemandForecastService(llm=None)
        use_case = ForecastDemandUseCase(store=stocked_store, forecast_service=service)

        response = await use_case.execute(ForecastRequest(supplier_id="S-2"))

        assert not response.generated_by_ai
        assert [f.product_id for f in response.forecasts] == ["P-3"]

    async def test_defaults_to_all_products(self, stocked_store):
        service = DemandForecastService(llm=None)
        use_case = ForecastDemandUseCase(store=stocked_store, forecast_service=service)

        response = await use_case.execute()

        assert {f.product_id for f in response.forecasts} == {"P-2", "P-3"}


class TestGenerateReportUseCase:
    async def test_passes_figures_to_report_service(self, stocked_store):
        report_service = AsyncMock(spec=InventoryReportService)
        report_service.generate.return_value = InventoryReport(
            year_month="2024-03",
            executive_summary="ok",
            trend_analysis="flat",
        )
        use_case = GenerateReportUseCase(
            store=stocked_store,
            reporter=ReconciliationReporter(stocked_store),
            report_service=report_service,
        )

        report = await use_case.execute("2024-3")

        assert report.executive_summary == "ok"
        args = report_service.generate.call_args
        assert args.args[0] == "2024-03"
        assert args.kwargs["total_inventory_value"] == 100
        assert args.kwargs["shortage_count"] == 2

    async def test_fallback_report_end_to_end(self, stocked_store):
        use_case = GenerateReportUseCase(
            store=stocked_store,
            reporter=ReconciliationReporter(stocked_store),
            report_service=InventoryReportService(llm=None),
        )
        report = await use_case.execute("2024-03")
        assert not report.generated_by_ai
        assert "2 products are short" in report.trend_analysis
