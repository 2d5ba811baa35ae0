"""
Base LLM provider with retry and circuit breaker patterns.

Every hosted-model call goes through ``_with_resilience`` so a flaky or
rate-limited API degrades into typed ``LLMError`` subclasses.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import (
    CircuitBreakerOpenError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from stockledger.core.interfaces.llm import HealthStatus, ILLMProvider

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE = (httpx.TransportError, LLMRateLimitError)


@dataclass
class CircuitBreakerState:
    """State for circuit breaker pattern."""

    failures: int = 0
    last_failure_time: float = 0.0
    is_open: bool = False
    cooldown_seconds: int = 60
    failure_threshold: int = 3

    def record_failure(self) -> None:
        """Record a failure and potentially open the circuit."""
        self.failures += 1
        self.last_failure_time = time.time()

        if self.failures >= self.failure_threshold:
            self.is_open = True
            logger.warning(
                "circuit_breaker_opened",
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )

    def record_success(self) -> None:
        if self.is_open:
            logger.info("circuit_breaker_closed")
        self.failures = 0
        self.is_open = False

    def check(self, provider: str) -> None:
        """Raise ``CircuitBreakerOpenError`` while the cooldown is running."""
        if not self.is_open:
            return

        elapsed = time.time() - self.last_failure_time
        if elapsed < self.cooldown_seconds:
            raise CircuitBreakerOpenError(provider, int(self.cooldown_seconds - elapsed))

        # Cooldown elapsed, let one request through (half-open)
        logger.info("circuit_breaker_half_open", provider=provider)


class BaseLLMProvider(ILLMProvider, ABC):
    """
    Base class for hosted LLM providers.

    Provides:
    - Retries with exponential backoff on transport errors and rate limits
    - Circuit breaker against cascading failures
    - Health check caching
    """

    provider_name = "llm"

    def __init__(self) -> None:
        settings = get_settings()
        self.circuit_breaker = CircuitBreakerState(
            failure_threshold=settings.llm.failure_threshold,
            cooldown_seconds=settings.llm.cooldown_seconds,
        )
        self._health_cache: HealthStatus | None = None
        self._health_cache_time: float = 0.0
        self._health_cache_ttl: float = 30.0

    def _retrying(self) -> AsyncRetrying:
        settings = get_settings().llm
        return AsyncRetrying(
            stop=stop_after_attempt(settings.max_retries),
            wait=wait_exponential(
                multiplier=settings.retry_delay,
                min=settings.retry_delay,
                max=settings.retry_delay * (settings.retry_multiplier**3),
            ),
            retry=retry_if_exception_type(RETRYABLE),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "llm_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _with_resilience(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute operation with retry and circuit breaker.

        Raises:
            CircuitBreakerOpenError: If circuit is open
            LLMTimeoutError: If operation times out
            LLMUnavailableError: If provider is unreachable
        """
        self.circuit_breaker.check(self.provider_name)

        try:
            result = None
            async for attempt in self._retrying():
                with attempt:
                    result = await operation(*args, **kwargs)
            self.circuit_breaker.record_success()
            return cast(T, result)

        except httpx.TimeoutException:
            self.circuit_breaker.record_failure()
            raise LLMTimeoutError(get_settings().llm.timeout)

        except httpx.TransportError as e:
            self.circuit_breaker.record_failure()
            raise LLMUnavailableError(self.provider_name, str(e))

        except LLMRateLimitError:
            self.circuit_breaker.record_failure()
            raise

        except Exception as e:
            # Bad payloads and auth failures don't trip the circuit
            logger.error("llm_error", error=str(e), error_type=type(e).__name__)
            raise

    def is_available(self) -> bool:
        """Cached availability; optimistic until a health check says otherwise."""
        if self.circuit_breaker.is_open:
            return False

        now = time.time()
        if self._health_cache and (now - self._health_cache_time) < self._health_cache_ttl:
            return self._health_cache.available

        return True

    def _update_health_cache(self, status: HealthStatus) -> None:
        self._health_cache = status
        self._health_cache_time = time.time()
