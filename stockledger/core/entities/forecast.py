"""Entities returned by the AI forecast and report collaborators."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DemandForecastResult(BaseModel):
    """Next-week usage forecast for one product."""

    product_id: str
    product_name: str = ""
    supplier_name: str = ""
    current_stock: int = 0
    predicted_usage_next_week: int = 0
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    will_run_out: bool = False
    days_until_stockout: int | None = None
    suggested_order_quantity: int = 0
    reason: str = ""


class HighlightType(str, Enum):
    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"


class ReportHighlight(BaseModel):
    type: HighlightType = HighlightType.INFO
    message: str


class TopUsedProduct(BaseModel):
    name: str
    usage_count: int
    usage_amount: float


class InventoryReport(BaseModel):
    """Narrative monthly report."""

    year_month: str
    executive_summary: str
    trend_analysis: str
    recommendations: list[str] = Field(default_factory=list)
    highlights: list[ReportHighlight] = Field(default_factory=list)
    top_used_products: list[TopUsedProduct] = Field(default_factory=list)
    generated_by_ai: bool = False
    generated_at: datetime = Field(default_factory=datetime.now)
