"""AI-assisted forecast and report endpoints.

Both work without a configured model; they fall back to deterministic output.
"""

from fastapi import APIRouter, Depends, Query

from stockledger.api.dependencies import (
    get_forecast_demand_use_case,
    get_generate_report_use_case,
)
from stockledger.application.dto.requests import ForecastRequest
from stockledger.application.dto.responses import ErrorResponse, ForecastResponse, ReportResponse
from stockledger.application.use_cases.forecast_demand import ForecastDemandUseCase
from stockledger.application.use_cases.generate_report import GenerateReportUseCase

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/forecast", response_model=ForecastResponse)
async def forecast_demand(
    request: ForecastRequest | None = None,
    use_case: ForecastDemandUseCase = Depends(get_forecast_demand_use_case),
) -> ForecastResponse:
    return await use_case.execute(request)


@router.post(
    "/report",
    response_model=ReportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_report(
    year_month: str = Query(..., description="Month as YYYY-MM"),
    use_case: GenerateReportUseCase = Depends(get_generate_report_use_case),
) -> ReportResponse:
    report = await use_case.execute(year_month)
    return ReportResponse(report=report)
