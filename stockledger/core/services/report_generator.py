"""
Monthly inventory report.

A pure consumer of the reconciliation output: supplier rows and totals go in,
narrative text comes out. Falls back to a templated report when no language
model is configured or the model call fails.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from pydantic import BaseModel, Field

from stockledger.config import get_logger, get_settings
from stockledger.core.entities.forecast import (
    HighlightType,
    InventoryReport,
    ReportHighlight,
    TopUsedProduct,
)
from stockledger.core.entities.inventory import Product, Transaction
from stockledger.core.entities.summary import SupplierMonthlySummary
from stockledger.core.exceptions import LLMError
from stockledger.core.interfaces.llm import ILLMProvider
from stockledger.core.services.aggregation import Classification, classify, select
from stockledger.core.services.periods import month_bounds, parse_year_month

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You write monthly inventory reports for a small business owner. "
    "Always answer with a single JSON object."
)


class _ReportPayload(BaseModel):
    executive_summary: str
    trend_analysis: str
    recommendations: list[str] = Field(default_factory=list)
    highlights: list[ReportHighlight] = Field(default_factory=list)


def top_used_products(
    year_month: str,
    transactions: Sequence[Transaction],
    products: Sequence[Product],
    limit: int = 5,
) -> list[TopUsedProduct]:
    """Products with the largest usage amount in the month."""
    window = month_bounds(*parse_year_month(year_month))
    product_map = {p.id: p for p in products}

    usage: dict[str, tuple[int, float]] = {}
    for txn in select(transactions, period=window):
        if classify(txn) is not Classification.USAGE:
            continue
        product = product_map.get(txn.product_id)
        price = product.unit_price if product else 0.0
        count, amount = usage.get(txn.product_id, (0, 0.0))
        usage[txn.product_id] = (count + txn.quantity, amount + txn.quantity * price)

    ranked = [
        TopUsedProduct(
            name=product_map[pid].name if pid in product_map else pid,
            usage_count=count,
            usage_amount=amount,
        )
        for pid, (count, amount) in usage.items()
    ]
    ranked.sort(key=lambda p: p.usage_amount, reverse=True)
    return ranked[:limit]


def build_prompt(
    summary: SupplierMonthlySummary,
    total_inventory_value: float,
    shortage_count: int,
    top_products: Sequence[TopUsedProduct],
) -> str:
    suppliers = "\n".join(
        f"- {row.supplier_name}: opening {row.previous_balance:,.0f}, "
        f"purchases {row.monthly_purchase:,.0f}, usage {row.monthly_usage:,.0f}, "
        f"change {row.change:,.0f}, closing {row.calculated_balance:,.0f}"
        for row in summary.rows
    )
    top = "\n".join(
        f"{rank}. {p.name}: {p.usage_count} units ({p.usage_amount:,.0f})"
        for rank, p in enumerate(top_products, start=1)
    )
    return f"""Analyse this month's inventory figures and write a short management report.

Month: {summary.year_month}

Suppliers:
{suppliers or "- none"}

Overall:
- Inventory value: {total_inventory_value:,.0f}
- Products below minimum stock: {shortage_count}

Most used products:
{top or "none"}

Answer with JSON in this shape:
{{
  "executive_summary": "two or three sentences",
  "trend_analysis": "trends and notable movements",
  "recommendations": ["action", "action", "action"],
  "highlights": [{{"type": "positive" | "warning" | "info", "message": "..."}}]
}}

Quote concrete figures and keep the recommendations practical.
"""


class InventoryReportService:
    """Generates the monthly narrative report."""

    def __init__(self, llm: ILLMProvider | None = None):
        self._llm = llm
        self._settings = get_settings()

    async def generate(
        self,
        year_month: str,
        supplier_summary: SupplierMonthlySummary,
        transactions: Sequence[Transaction],
        products: Sequence[Product],
        total_inventory_value: float,
        shortage_count: int,
    ) -> InventoryReport:
        top_products = top_used_products(
            year_month,
            transactions,
            products,
            limit=self._settings.reconcile.report_top_products,
        )

        if self._llm is None:
            logger.info("report_fallback_used", year_month=year_month, reason="ai_disabled")
            return simple_report(
                year_month, supplier_summary, total_inventory_value, shortage_count, top_products
            )

        try:
            response = await self._llm.chat(
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": build_prompt(
                            supplier_summary, total_inventory_value, shortage_count, top_products
                        ),
                    },
                ],
                temperature=self._settings.llm.report_temperature,
                json_mode=True,
            )
            payload = _ReportPayload.model_validate(json.loads(response.text))
        except (LLMError, ValueError) as e:
            logger.warning(
                "report_fallback_used",
                year_month=year_month,
                reason=type(e).__name__,
                error=str(e),
            )
            return simple_report(
                year_month, supplier_summary, total_inventory_value, shortage_count, top_products
            )

        logger.info("report_generated", year_month=year_month, model=response.model)
        return InventoryReport(
            year_month=year_month,
            executive_summary=payload.executive_summary,
            trend_analysis=payload.trend_analysis,
            recommendations=payload.recommendations,
            highlights=payload.highlights,
            top_used_products=list(top_products),
            generated_by_ai=True,
        )


def simple_report(
    year_month: str,
    summary: SupplierMonthlySummary,
    total_inventory_value: float,
    shortage_count: int,
    top_products: Sequence[TopUsedProduct],
) -> InventoryReport:
    """Templated report built from the figures alone."""
    total_purchase = summary.totals.monthly_purchase
    total_usage = summary.totals.monthly_usage

    highlights = []
    if shortage_count > 0:
        highlights.append(
            ReportHighlight(
                type=HighlightType.WARNING,
                message=f"{shortage_count} products are below minimum stock. Consider ordering.",
            )
        )
    if total_usage > total_purchase:
        highlights.append(
            ReportHighlight(
                type=HighlightType.INFO,
                message=(
                    "Usage exceeded purchases this month "
                    f"(difference: {total_usage - total_purchase:,.0f})."
                ),
            )
        )
    if top_products:
        top = top_products[0]
        highlights.append(
            ReportHighlight(
                type=HighlightType.POSITIVE,
                message=f"Most used product: {top.name} ({top.usage_count} units).",
            )
        )

    if shortage_count > 0:
        shortage_text = f"{shortage_count} products are short and need to be ordered."
        recommendations = [
            "Prioritise orders for products below minimum stock.",
            "Review safety stock for frequently used products.",
        ]
    else:
        shortage_text = "No products are currently short."
        recommendations = ["Maintain current stock levels."]

    return InventoryReport(
        year_month=year_month,
        executive_summary=(
            f"Purchases for {year_month} totalled {total_purchase:,.0f} and usage "
            f"totalled {total_usage:,.0f}. Inventory is valued at "
            f"{total_inventory_value:,.0f}."
        ),
        trend_analysis=f"Activity with {len(summary.rows)} suppliers. {shortage_text}",
        recommendations=recommendations,
        highlights=highlights,
        top_used_products=list(top_products),
        generated_by_ai=False,
    )
