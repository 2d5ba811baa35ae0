"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests swap any of these via
``app.dependency_overrides``.
"""

from fastapi import Depends

from stockledger.application.services import (
    get_demand_forecast_service,
    get_inventory_report_service,
    get_ledger_persistence,
    get_ledger_store,
    get_reconciliation_reporter,
)
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    ForecastDemandUseCase,
    GenerateReportUseCase,
    MonthlySummaryUseCase,
)
from stockledger.core.interfaces import ILedgerPersistence, ILLMProvider
from stockledger.core.services import (
    DemandForecastService,
    InventoryReportService,
    LedgerStore,
    ReconciliationReporter,
)
from stockledger.infrastructure.llm import get_llm_provider


# Core dependencies
def get_store() -> LedgerStore:
    """Get the shared ledger store."""
    return get_ledger_store()


def get_persistence() -> ILedgerPersistence:
    """Get ledger persistence."""
    return get_ledger_persistence()


def get_reporter(store: LedgerStore = Depends(get_store)) -> ReconciliationReporter:
    """Get a reconciliation reporter bound to the request's store."""
    if store is get_ledger_store():
        return get_reconciliation_reporter()
    return get_reconciliation_reporter(store)


def get_llm() -> ILLMProvider | None:
    """Get LLM provider, or None when AI is disabled."""
    return get_llm_provider()


def get_forecast_service() -> DemandForecastService:
    return get_demand_forecast_service()


def get_report_service() -> InventoryReportService:
    return get_inventory_report_service()


# Use case dependencies
def get_adjust_stock_use_case(
    store: LedgerStore = Depends(get_store),
    persistence: ILedgerPersistence = Depends(get_persistence),
) -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase(store=store, persistence=persistence)


def get_monthly_summary_use_case(
    reporter: ReconciliationReporter = Depends(get_reporter),
) -> MonthlySummaryUseCase:
    """Get monthly summary use case."""
    return MonthlySummaryUseCase(reporter=reporter)


def get_forecast_demand_use_case(
    store: LedgerStore = Depends(get_store),
    service: DemandForecastService = Depends(get_forecast_service),
) -> ForecastDemandUseCase:
    """Get forecast demand use case."""
    return ForecastDemandUseCase(store=store, forecast_service=service)


def get_generate_report_use_case(
    store: LedgerStore = Depends(get_store),
    reporter: ReconciliationReporter = Depends(get_reporter),
    service: InventoryReportService = Depends(get_report_service),
) -> GenerateReportUseCase:
    """Get generate report use case."""
    return GenerateReportUseCase(store=store, reporter=reporter, report_service=service)
