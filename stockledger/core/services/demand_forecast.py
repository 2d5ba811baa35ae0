"""
Demand forecast service.

Builds weekly usage histories from the ledger and asks the language model for
a next-week forecast. Without a provider, a moving-average forecast is used.
The output is advisory and never feeds back into the ledger arithmetic.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.forecast import ConfidenceLevel, DemandForecastResult
from stockledger.core.entities.inventory import Product, Supplier, Transaction
from stockledger.core.exceptions import LLMError
from stockledger.core.interfaces.llm import ILLMProvider
from stockledger.core.services.aggregation import Classification, classify
from stockledger.core.services.periods import to_local
from stockledger.core.services.reconciliation import days_until_stockout

logger = get_logger(__name__)

StockLookup = Callable[[str], int]

SYSTEM_PROMPT = (
    "You are an inventory planning specialist. Forecast demand and always "
    "answer with a single JSON object."
)


@dataclass
class ForecastInput:
    """Per-product history handed to the model."""

    product_id: str
    product_name: str
    supplier_name: str
    weekly_usage: list[int]
    current_stock: int
    min_stock: int

    @property
    def is_active(self) -> bool:
        return any(self.weekly_usage) or self.current_stock < self.min_stock


class _ForecastItem(BaseModel):
    product_id: str
    predicted_usage_next_week: int = 0
    confidence_level: ConfidenceLevel = ConfidenceLevel.MEDIUM
    will_run_out: bool = False
    days_until_stockout: int | None = None
    suggested_order_quantity: int = 0
    reason: str = ""


class _ForecastPayload(BaseModel):
    forecasts: list[_ForecastItem] = Field(default_factory=list)


def weekly_usage(
    product_id: str,
    transactions: Sequence[Transaction],
    weeks_back: int = 12,
    now: datetime | None = None,
) -> list[int]:
    """
    Usage per trailing 7-day window, oldest first.

    Window ``i`` (counting back from ``now``) is ``[now - 7(i+1)d, now - 7i d)``.
    """
    now = to_local(now or datetime.now())
    usage = [0] * weeks_back
    horizon = now - timedelta(days=7 * weeks_back)

    for txn in transactions:
        if txn.product_id != product_id or classify(txn) is not Classification.USAGE:
            continue
        moment = to_local(txn.date)
        if not horizon <= moment < now:
            continue
        weeks_ago = math.ceil((now - moment) / timedelta(days=7)) - 1
        usage[weeks_back - 1 - weeks_ago] += txn.quantity

    return usage


def build_prompt(batch: Sequence[ForecastInput]) -> str:
    blocks = "\n---\n".join(
        f"Product: {p.product_name} ({p.product_id})\n"
        f"Supplier: {p.supplier_name}\n"
        f"Weekly usage, oldest first: {', '.join(str(u) for u in p.weekly_usage)}\n"
        f"Current stock: {p.current_stock}\n"
        f"Minimum stock: {p.min_stock}"
        for p in batch
    )
    return f"""Analyse the products below and forecast next week's demand.

{blocks}

Answer with JSON in this shape, one entry per product:
{{
  "forecasts": [
    {{
      "product_id": "product id",
      "predicted_usage_next_week": integer,
      "confidence_level": "high" | "medium" | "low",
      "will_run_out": true | false,
      "days_until_stockout": integer or null,
      "suggested_order_quantity": integer,
      "reason": "short justification"
    }}
  ]
}}

Guidelines:
- Consider trend and week-to-week variation in the history.
- Judge stock-out risk from current stock against the predicted usage.
- Use "high" confidence for stable histories and "low" for erratic ones.
"""


def _sort_key(result: DemandForecastResult) -> tuple[bool, bool, int]:
    days = result.days_until_stockout
    return (not result.will_run_out, days is None, days if days is not None else 0)


class DemandForecastService:
    """Next-week demand forecasts, AI-backed when a provider is configured."""

    def __init__(self, llm: ILLMProvider | None = None):
        self._llm = llm
        self._settings = get_settings()

    @property
    def ai_enabled(self) -> bool:
        return self._llm is not None

    async def forecast(
        self,
        products: Sequence[Product],
        transactions: Sequence[Transaction],
        suppliers: Sequence[Supplier],
        stock_lookup: StockLookup,
        now: datetime | None = None,
    ) -> list[DemandForecastResult]:
        """Forecast every product with recent usage or a current shortage."""
        inputs = self._build_inputs(products, transactions, suppliers, stock_lookup, now)

        if self._llm is None:
            logger.info("forecast_fallback_used", products=len(inputs))
            return self._simple_forecast(inputs)

        active = [p for p in inputs if p.is_active]
        if not active:
            return []

        batch_size = self._settings.reconcile.forecast_batch_size
        results: list[DemandForecastResult] = []
        for start in range(0, len(active), batch_size):
            batch = active[start : start + batch_size]
            results.extend(await self._forecast_batch(self._llm, batch))

        results.sort(key=_sort_key)
        logger.info("forecast_complete", products=len(active), results=len(results))
        return results

    def _build_inputs(
        self,
        products: Sequence[Product],
        transactions: Sequence[Transaction],
        suppliers: Sequence[Supplier],
        stock_lookup: StockLookup,
        now: datetime | None,
    ) -> list[ForecastInput]:
        weeks = self._settings.reconcile.forecast_weeks
        unknown = self._settings.reconcile.unknown_label
        supplier_names = {s.id: s.name for s in suppliers}
        return [
            ForecastInput(
                product_id=product.id,
                product_name=product.name,
                supplier_name=supplier_names.get(product.supplier_id, unknown),
                weekly_usage=weekly_usage(product.id, transactions, weeks, now),
                current_stock=stock_lookup(product.id),
                min_stock=product.min_stock,
            )
            for product in products
        ]

    async def _forecast_batch(
        self, llm: ILLMProvider, batch: list[ForecastInput]
    ) -> list[DemandForecastResult]:
        """Forecast one batch; a failed batch contributes nothing."""
        try:
            response = await llm.chat(
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(batch)},
                ],
                temperature=self._settings.llm.temperature,
                json_mode=True,
            )
            payload = _ForecastPayload.model_validate(json.loads(response.text))
        except (LLMError, ValueError) as e:
            logger.warning(
                "forecast_batch_failed",
                batch_size=len(batch),
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

        by_id = {p.product_id: p for p in batch}
        results = []
        for item in payload.forecasts:
            source = by_id.get(item.product_id)
            if source is None:
                logger.warning("forecast_unknown_product", product_id=item.product_id)
                continue
            results.append(
                DemandForecastResult(
                    product_id=item.product_id,
                    product_name=source.product_name,
                    supplier_name=source.supplier_name,
                    current_stock=source.current_stock,
                    predicted_usage_next_week=item.predicted_usage_next_week,
                    confidence_level=item.confidence_level,
                    will_run_out=item.will_run_out,
                    days_until_stockout=item.days_until_stockout,
                    suggested_order_quantity=item.suggested_order_quantity,
                    reason=item.reason,
                )
            )
        return results

    def _simple_forecast(self, inputs: list[ForecastInput]) -> list[DemandForecastResult]:
        """Moving-average forecast over the most recent weeks."""
        recent_weeks = self._settings.reconcile.forecast_recent_weeks
        results = []

        for p in inputs:
            recent = p.weekly_usage[-recent_weeks:]
            avg_usage = math.ceil(sum(recent) / len(recent)) if recent else 0

            if avg_usage == 0 and p.current_stock >= p.min_stock:
                continue

            days_left = days_until_stockout(p.current_stock, avg_usage)
            will_run_out = days_left is not None and days_left <= 7

            if not will_run_out and p.current_stock >= p.min_stock:
                continue

            results.append(
                DemandForecastResult(
                    product_id=p.product_id,
                    product_name=p.product_name,
                    supplier_name=p.supplier_name,
                    current_stock=p.current_stock,
                    predicted_usage_next_week=avg_usage,
                    confidence_level=ConfidenceLevel.MEDIUM,
                    will_run_out=will_run_out,
                    days_until_stockout=days_left,
                    suggested_order_quantity=max(0, p.min_stock - p.current_stock + avg_usage),
                    reason=f"Average usage over the last {len(recent)} weeks: {avg_usage} per week",
                )
            )

        results.sort(key=lambda r: not r.will_run_out)
        return results
