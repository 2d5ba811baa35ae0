"""Forecast Demand Use Case."""

from datetime import datetime

from stockledger.application.dto.requests import ForecastRequest
from stockledger.application.dto.responses import ForecastResponse
from stockledger.config import get_logger
from stockledger.core.services.demand_forecast import DemandForecastService
from stockledger.core.services.ledger_store import LedgerStore

logger = get_logger(__name__)


class ForecastDemandUseCase:
    """Run the demand forecast over the current ledger snapshot."""

    def __init__(
        self,
        store: LedgerStore | None = None,
        forecast_service: DemandForecastService | None = None,
    ):
        self._store = store
        self._forecast_service = forecast_service

    def _get_store(self) -> LedgerStore:
        if self._store is None:
            from stockledger.application.services import get_ledger_store

            self._store = get_ledger_store()
        return self._store

    def _get_service(self) -> DemandForecastService:
        if self._forecast_service is None:
            from stockledger.application.services import get_demand_forecast_service

            self._forecast_service = get_demand_forecast_service()
        return self._forecast_service

    async def execute(
        self,
        request: ForecastRequest | None = None,
        now: datetime | None = None,
    ) -> ForecastResponse:
        request = request or ForecastRequest()
        snapshot = self._get_store().snapshot()
        service = self._get_service()

        products = list(snapshot.products)
        if request.supplier_id:
            products = [p for p in products if p.supplier_id == request.supplier_id]

        logger.info(
            "forecast_started",
            products=len(products),
            supplier_id=request.supplier_id,
            ai=service.ai_enabled,
        )

        forecasts = await service.forecast(
            products,
            snapshot.transactions,
            snapshot.suppliers,
            snapshot.get_stock,
            now=now,
        )
        return ForecastResponse(generated_by_ai=service.ai_enabled, forecasts=forecasts)
