"""Stock level and adjustment endpoints."""

from fastapi import APIRouter, Depends, status

from stockledger.api.dependencies import get_adjust_stock_use_case, get_store
from stockledger.application.dto.requests import AdjustStockRequest
from stockledger.application.dto.responses import (
    AdjustStockResponse,
    ErrorResponse,
    StockResponse,
)
from stockledger.application.use_cases.adjust_stock import AdjustStockUseCase
from stockledger.core.services import LedgerStore

router = APIRouter(prefix="/api/stock", tags=["stock"])


@router.get("/{product_id}", response_model=StockResponse)
async def get_stock(
    product_id: str,
    store: LedgerStore = Depends(get_store),
) -> StockResponse:
    """Current physical count. Unknown products report 0."""
    product = store.get_product(product_id)
    quantity = store.get_stock(product_id)
    unit_price = product.unit_price if product else 0.0
    return StockResponse(
        product_id=product_id,
        quantity=quantity,
        unit_price=unit_price,
        value=quantity * unit_price,
        known_product=product is not None,
    )


@router.post(
    "/{product_id}/adjust",
    response_model=AdjustStockResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def adjust_stock(
    product_id: str,
    request: AdjustStockRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> AdjustStockResponse:
    """Move stock in or out and append the matching ledger entry."""
    result = await use_case.execute(product_id, request)
    return use_case.to_response(result)
