"""Tests for the demand forecast service."""

import json
from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from stockledger.core.entities.forecast import ConfidenceLevel
from stockledger.core.entities.inventory import Product, Supplier
from stockledger.core.exceptions import LLMTimeoutError
from stockledger.core.interfaces.llm import LLMResponse
from stockledger.core.services.demand_forecast import (
    DemandForecastService,
    ForecastInput,
    build_prompt,
    weekly_usage,
)

NOW = datetime(2024, 3, 29, 12, 0)


@pytest.fixture
def catalog():
    suppliers = [Supplier(id="S-1", name="Tokyo Parts")]
    products = [
        Product(id="P-1", name="Bolt", supplier_id="S-1", unit_price=10, min_stock=5),
        Product(id="P-2", name="Nut", supplier_id="S-1", unit_price=20, min_stock=0),
    ]
    return suppliers, products


@pytest.fixture
def history(make_txn):
    """Four weeks of steady usage of 7 for P-1, nothing for P-2."""
    return [
        make_txn("P-1", "out", 7, NOW - timedelta(days=1 + 7 * week), "usage")
        for week in range(4)
    ]


def _llm(payload) -> AsyncMock:
    llm = AsyncMock()
    llm.chat.return_value = LLMResponse(text=json.dumps(payload), model="gpt-4o")
    return llm


class TestWeeklyUsage:
    def test_oldest_first(self, make_txn):
        txns = [
            make_txn("P-1", "out", 3, NOW - timedelta(days=2), "usage"),
            make_txn("P-1", "out", 5, NOW - timedelta(days=9), "usage"),
            make_txn("P-1", "in", 50, NOW - timedelta(days=2)),
            make_txn("P-2", "out", 9, NOW - timedelta(days=2), "usage"),
        ]
        usage = weekly_usage("P-1", txns, weeks_back=3, now=NOW)
        assert usage == [0, 5, 3]

    def test_window_edges(self, make_txn):
        """An entry exactly 7 days back still falls in the latest window."""
        txns = [
            make_txn("P-1", "out", 1, NOW - timedelta(days=7), "usage"),
            make_txn("P-1", "out", 1, NOW - timedelta(days=84), "usage"),
            make_txn("P-1", "out", 1, NOW - timedelta(days=85), "usage"),
        ]
        usage = weekly_usage("P-1", txns, weeks_back=12, now=NOW)
        assert usage[-1] == 1
        assert usage[0] == 1
        assert sum(usage) == 2


class TestSimpleForecast:
    async def test_fallback_without_llm(self, catalog, history):
        suppliers, products = catalog
        service = DemandForecastService(llm=None)
        stock = {"P-1": 3, "P-2": 100}

        results = await service.forecast(products, history, suppliers, stock.get, now=NOW)

        assert not service.ai_enabled
        [result] = results
        assert result.product_id == "P-1"
        assert result.predicted_usage_next_week == 7
        assert result.days_until_stockout == 3
        assert result.will_run_out
        assert result.suggested_order_quantity == 5 - 3 + 7
        assert result.confidence_level is ConfidenceLevel.MEDIUM

    async def test_zero_usage_never_divides(self, catalog):
        suppliers, products = catalog
        service = DemandForecastService(llm=None)
        results = await service.forecast(products, [], suppliers, lambda _: 0, now=NOW)
        # Short but idle: reported without a stock-out estimate
        [result] = results
        assert result.product_id == "P-1"
        assert result.days_until_stockout is None
        assert not result.will_run_out


class TestAIForecast:
    async def test_parses_model_output(self, catalog, history):
        suppliers, products = catalog
        llm = _llm(
            {
                "forecasts": [
                    {
                        "product_id": "P-1",
                        "predicted_usage_next_week": 8,
                        "confidence_level": "high",
                        "will_run_out": True,
                        "days_until_stockout": 2,
                        "suggested_order_quantity": 12,
                        "reason": "steady demand",
                    }
                ]
            }
        )
        service = DemandForecastService(llm=llm)

        results = await service.forecast(products, history, suppliers, lambda _: 3, now=NOW)

        [result] = results
        assert result.product_name == "Bolt"
        assert result.supplier_name == "Tokyo Parts"
        assert result.confidence_level is ConfidenceLevel.HIGH
        kwargs = llm.chat.call_args.kwargs
        assert kwargs["json_mode"] is True
        assert "Bolt (P-1)" in kwargs["messages"][1]["content"]

    async def test_inactive_products_are_not_sent(self, catalog, history):
        suppliers, products = catalog
        llm = _llm({"forecasts": []})
        service = DemandForecastService(llm=llm)

        await service.forecast(products, history, suppliers, lambda _: 50, now=NOW)

        prompt = llm.chat.call_args.kwargs["messages"][1]["content"]
        assert "P-2" not in prompt

    async def test_failed_batch_yields_nothing(self, catalog, history):
        suppliers, products = catalog
        llm = AsyncMock()
        llm.chat.side_effect = LLMTimeoutError(60)
        service = DemandForecastService(llm=llm)

        assert await service.forecast(products, history, suppliers, lambda _: 3, now=NOW) == []

    async def test_malformed_json_yields_nothing(self, catalog, history):
        suppliers, products = catalog
        llm = AsyncMock()
        llm.chat.return_value = LLMResponse(text="not json", model="gpt-4o")
        service = DemandForecastService(llm=llm)

        assert await service.forecast(products, history, suppliers, lambda _: 3, now=NOW) == []

    async def test_batches_of_configured_size(self, monkeypatch, make_txn):
        from stockledger.config import reset_settings

        monkeypatch.setenv("RECONCILE_FORECAST_BATCH_SIZE", "2")
        reset_settings()
        suppliers = [Supplier(id="S-1", name="A")]
        products = [
            Product(id=f"P-{i}", name=f"Item {i}", supplier_id="S-1", min_stock=10)
            for i in range(5)
        ]
        llm = _llm({"forecasts": []})
        service = DemandForecastService(llm=llm)

        await service.forecast(products, [], suppliers, lambda _: 0, now=NOW)

        assert llm.chat.await_count == 3

    async def test_sorted_run_out_first(self, catalog, history):
        suppliers, products = catalog
        products = [products[0], products[1].model_copy(update={"min_stock": 5})]
        llm = _llm(
            {
                "forecasts": [
                    {"product_id": "P-1", "will_run_out": False, "days_until_stockout": 30},
                    {"product_id": "P-2", "will_run_out": True, "days_until_stockout": 4},
                    {"product_id": "P-9", "will_run_out": True},
                ]
            }
        )
        service = DemandForecastService(llm=llm)
        results = await service.forecast(products, history, suppliers, lambda _: 1, now=NOW)
        # Unknown ids from the model are dropped
        assert [r.product_id for r in results] == ["P-2", "P-1"]


class TestBuildPrompt:
    def test_lists_every_product(self):
        batch = [
            ForecastInput("P-1", "Bolt", "A", [1, 2, 3], current_stock=4, min_stock=5),
            ForecastInput("P-2", "Nut", "B", [0, 0, 1], current_stock=9, min_stock=1),
        ]
        prompt = build_prompt(batch)
        assert "Bolt (P-1)" in prompt
        assert "Weekly usage, oldest first: 0, 0, 1" in prompt
