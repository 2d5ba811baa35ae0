"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_llm, get_store
from stockledger.application.dto.responses import HealthResponse, ProviderHealthResponse
from stockledger.core.interfaces import ILLMProvider
from stockledger.core.services import LedgerStore

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(store: LedgerStore = Depends(get_store)) -> HealthResponse:
    """
    Basic health check.

    Returns service status, uptime and the in-memory ledger revision.
    """
    return HealthResponse(
        status="healthy",
        uptime_seconds=time.time() - _start_time,
        ledger_revision=store.revision,
    )


@router.get("/llm", response_model=HealthResponse)
async def llm_health(llm: ILLMProvider | None = Depends(get_llm)) -> HealthResponse:
    """
    LLM provider health check.

    AI features are optional, so a disabled provider still reports healthy.
    """
    if llm is None:
        return HealthResponse(
            status="healthy",
            uptime_seconds=time.time() - _start_time,
            llm=ProviderHealthResponse(name="disabled", available=False),
        )

    result = await llm.check_health()
    llm_status = ProviderHealthResponse(
        name=result.provider,
        available=result.available,
        latency_ms=result.response_time_ms,
        error=result.error,
    )
    return HealthResponse(
        status="healthy" if llm_status.available else "degraded",
        uptime_seconds=time.time() - _start_time,
        llm=llm_status,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    import aiosqlite

    from stockledger.infrastructure.storage.sqlite import get_connection

    start = time.time()
    try:
        async with get_connection() as conn:
            await conn.execute("SELECT 1")
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=(time.time() - start) * 1000,
        )
    except (aiosqlite.Error, OSError) as e:
        db_status = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
