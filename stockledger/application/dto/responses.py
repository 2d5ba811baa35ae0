"""Response DTOs for API endpoints.

Summary rows are served as the domain models themselves; these wrappers add
the envelope fields the API returns around them.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.forecast import DemandForecastResult, InventoryReport
from stockledger.core.entities.summary import (
    CustomerUsageSummary,
    DailyReceiptSummary,
    ProductSummaryRow,
    ShortageItem,
)


class TransactionResponse(BaseModel):
    """Ledger entry as returned by the API."""

    id: str
    product_id: str
    type: str
    sub_type: str | None = None
    quantity: int
    date: datetime
    customer_id: str | None = None
    operator: str | None = None
    note: str | None = None


class StockResponse(BaseModel):
    """Current physical count for one product."""

    product_id: str
    quantity: int
    unit_price: float = 0.0
    value: float = 0.0
    known_product: bool = True


class AdjustStockResponse(BaseModel):
    """Stock row and ledger entry written by one adjustment."""

    stock: StockResponse
    transaction: TransactionResponse


class ProductSummaryResponse(BaseModel):
    year_month: str
    rows: list[ProductSummaryRow] = Field(default_factory=list)


class ShortageResponse(BaseModel):
    items: list[ShortageItem] = Field(default_factory=list)
    total_order_amount: float = 0.0
    total_inventory_value: float = 0.0


class ReceiptSummaryResponse(BaseModel):
    day: date
    suppliers: list[DailyReceiptSummary] = Field(default_factory=list)


class CustomerSummaryResponse(BaseModel):
    year_month: str
    customers: list[CustomerUsageSummary] = Field(default_factory=list)


class ForecastResponse(BaseModel):
    """Demand forecast results."""

    generated_by_ai: bool
    forecasts: list[DemandForecastResult] = Field(default_factory=list)


class ReportResponse(BaseModel):
    report: InventoryReport


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    llm: ProviderHealthResponse | None = None
    database: ProviderHealthResponse | None = None
    ledger_revision: int = 0


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVALID_PERIOD)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
