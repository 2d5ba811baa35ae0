"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from stockledger.application.dto import (
    AdjustStockRequest,
    AdjustStockResponse,
    ErrorResponse,
    ForecastRequest,
    ForecastResponse,
    HealthResponse,
)
from stockledger.application.services import (
    get_demand_forecast_service,
    get_inventory_report_service,
    get_ledger_store,
    get_reconciliation_reporter,
    reset_services,
)
from stockledger.application.use_cases import (
    AdjustStockUseCase,
    ForecastDemandUseCase,
    GenerateReportUseCase,
    MonthlySummaryUseCase,
)

__all__ = [
    # DTOs
    "AdjustStockRequest",
    "AdjustStockResponse",
    "ForecastRequest",
    "ForecastResponse",
    "HealthResponse",
    "ErrorResponse",
    # Service factories
    "get_ledger_store",
    "get_reconciliation_reporter",
    "get_demand_forecast_service",
    "get_inventory_report_service",
    "reset_services",
    # Use cases
    "AdjustStockUseCase",
    "MonthlySummaryUseCase",
    "ForecastDemandUseCase",
    "GenerateReportUseCase",
]
