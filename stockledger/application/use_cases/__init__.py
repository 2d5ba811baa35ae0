"""
Use cases - application-level orchestration.

Each use case coordinates core services and persistence for one
API-facing operation.
"""

from stockledger.application.use_cases.adjust_stock import AdjustStockResult, AdjustStockUseCase
from stockledger.application.use_cases.forecast_demand import ForecastDemandUseCase
from stockledger.application.use_cases.generate_report import GenerateReportUseCase
from stockledger.application.use_cases.monthly_summary import MonthlySummaryUseCase

__all__ = [
    "AdjustStockUseCase",
    "AdjustStockResult",
    "MonthlySummaryUseCase",
    "ForecastDemandUseCase",
    "GenerateReportUseCase",
]
