"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.inventory import TransactionSubType, TransactionType


class AdjustStockRequest(BaseModel):
    """Request to move stock in or out and record the ledger entry."""

    quantity: int = Field(..., gt=0, description="Units moved, always positive")
    direction: TransactionType = Field(..., description="in or out")
    sub_type: TransactionSubType | None = Field(
        default=None,
        description="purchase, stockIn, usage or adjustment",
        examples=["purchase", "usage"],
    )
    customer_id: str | None = Field(default=None, description="Customer the usage is booked to")
    operator: str | None = Field(default=None, description="Who performed the movement")
    note: str | None = Field(default=None, description="Free text; claim/factory keywords are read from here")
    date: datetime | None = Field(default=None, description="Defaults to now")


class ForecastRequest(BaseModel):
    """Request for a demand forecast."""

    supplier_id: str | None = Field(
        default=None,
        description="Restrict the forecast to one supplier's products",
    )
