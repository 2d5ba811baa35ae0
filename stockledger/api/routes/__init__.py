"""API route modules."""

from stockledger.api.routes.ai import router as ai_router
from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.stock import router as stock_router
from stockledger.api.routes.summary import router as summary_router

__all__ = [
    "health_router",
    "stock_router",
    "summary_router",
    "ai_router",
]
