"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import AdjustStockRequest, ForecastRequest
from stockledger.application.dto.responses import (
    AdjustStockResponse,
    CustomerSummaryResponse,
    ErrorResponse,
    ForecastResponse,
    HealthResponse,
    ProductSummaryResponse,
    ProviderHealthResponse,
    ReceiptSummaryResponse,
    ReportResponse,
    ShortageResponse,
    StockResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "ForecastRequest",
    # Responses
    "AdjustStockResponse",
    "StockResponse",
    "TransactionResponse",
    "ProductSummaryResponse",
    "ShortageResponse",
    "ReceiptSummaryResponse",
    "CustomerSummaryResponse",
    "ForecastResponse",
    "ReportResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
