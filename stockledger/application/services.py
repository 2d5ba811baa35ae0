"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from stockledger.core.services import (
    DemandForecastService,
    InventoryReportService,
    LedgerStore,
    ReconciliationReporter,
)

if TYPE_CHECKING:
    from stockledger.core.interfaces import ILedgerPersistence, ILLMProvider


# Singleton service instances
_ledger_store: LedgerStore | None = None
_reporter: ReconciliationReporter | None = None
_forecast_service: DemandForecastService | None = None
_report_service: InventoryReportService | None = None


def get_ledger_store() -> LedgerStore:
    """
    Get the process-wide ledger store.

    Starts empty; the API lifespan restores it from persistence.
    """
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = LedgerStore()
    return _ledger_store


def get_reconciliation_reporter(store: LedgerStore | None = None) -> ReconciliationReporter:
    """Get or create the reconciliation reporter over the shared store."""
    global _reporter

    if store is not None:
        return ReconciliationReporter(store)

    if _reporter is None:
        _reporter = ReconciliationReporter(get_ledger_store())
    return _reporter


def get_ledger_persistence() -> "ILedgerPersistence":
    # Lazy import infrastructure to avoid circular imports
    from stockledger.infrastructure.storage.sqlite import get_ledger_persistence as _get

    return _get()


def _default_llm() -> "ILLMProvider | None":
    from stockledger.infrastructure.llm import get_llm_provider

    return get_llm_provider()


def get_demand_forecast_service(llm: "ILLMProvider | None" = None) -> DemandForecastService:
    """
    Get or create DemandForecastService.

    Args:
        llm: Optional provider override; the configured provider otherwise

    Returns:
        Forecast service, AI-backed when a provider is available
    """
    global _forecast_service

    if llm is not None:
        return DemandForecastService(llm=llm)

    if _forecast_service is None:
        _forecast_service = DemandForecastService(llm=_default_llm())
    return _forecast_service


def get_inventory_report_service(llm: "ILLMProvider | None" = None) -> InventoryReportService:
    """Get or create InventoryReportService."""
    global _report_service

    if llm is not None:
        return InventoryReportService(llm=llm)

    if _report_service is None:
        _report_service = InventoryReportService(llm=_default_llm())
    return _report_service


def reset_services() -> None:
    """Reset all singleton instances (for testing)."""
    global _ledger_store, _reporter, _forecast_service, _report_service
    _ledger_store = None
    _reporter = None
    _forecast_service = None
    _report_service = None
