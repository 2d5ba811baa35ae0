"""Monthly rollup and reconciliation endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from stockledger.api.dependencies import get_monthly_summary_use_case
from stockledger.application.dto.responses import (
    CustomerSummaryResponse,
    ErrorResponse,
    ProductSummaryResponse,
    ReceiptSummaryResponse,
    ShortageResponse,
)
from stockledger.application.use_cases.monthly_summary import MonthlySummaryUseCase
from stockledger.core.entities.summary import SupplierMonthlySummary

router = APIRouter(prefix="/api/summary", tags=["summary"])

YearMonth = Query(..., description="Month as YYYY-MM", examples=["2024-03"])


@router.get(
    "/products",
    response_model=ProductSummaryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def product_summary(
    year_month: str = YearMonth,
    use_case: MonthlySummaryUseCase = Depends(get_monthly_summary_use_case),
) -> ProductSummaryResponse:
    """Per-product weekly and daily rollup with ledger-vs-count diff."""
    return use_case.products(year_month)


@router.get(
    "/suppliers",
    response_model=SupplierMonthlySummary,
    responses={400: {"model": ErrorResponse}},
)
async def supplier_summary(
    year_month: str = YearMonth,
    use_case: MonthlySummaryUseCase = Depends(get_monthly_summary_use_case),
) -> SupplierMonthlySummary:
    """Monetary reconciliation per supplier plus a totals row."""
    return use_case.suppliers(year_month)


@router.get("/shortages", response_model=ShortageResponse)
async def shortages(
    use_case: MonthlySummaryUseCase = Depends(get_monthly_summary_use_case),
) -> ShortageResponse:
    """Products below minimum stock, largest shortage first."""
    return use_case.shortages()


@router.get("/receipts", response_model=ReceiptSummaryResponse)
async def daily_receipts(
    day: date = Query(..., description="Local calendar day"),
    use_case: MonthlySummaryUseCase = Depends(get_monthly_summary_use_case),
) -> ReceiptSummaryResponse:
    """Incoming goods for one day, grouped by supplier."""
    return use_case.receipts(day)


@router.get(
    "/customers",
    response_model=CustomerSummaryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def customer_usage(
    year_month: str = YearMonth,
    use_case: MonthlySummaryUseCase = Depends(get_monthly_summary_use_case),
) -> CustomerSummaryResponse:
    """Usage booked to each customer in the month."""
    return use_case.customers(year_month)
