"""
Domain exceptions for stockledger.

Missing references (a product without a supplier, a transaction without a
product) are never raised; they degrade to sentinel values in the reports.
"""

from typing import Any


class StockLedgerError(Exception):
    """Base exception for all stockledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Period Exceptions
class InvalidPeriodError(StockLedgerError):
    """Requested year/month (or day) is not a valid calendar period."""

    def __init__(self, value: Any, reason: str):
        super().__init__(
            f"Invalid period {value!r}: {reason}",
            code="INVALID_PERIOD",
            details={"value": str(value), "reason": reason},
        )


# Storage Exceptions
class StorageError(StockLedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class CorruptSnapshotError(StorageError):
    """A persisted table could not be decoded."""

    def __init__(self, storage_key: str, reason: str):
        super().__init__(
            f"Stored table '{storage_key}' is unreadable: {reason}",
            code="CORRUPT_SNAPSHOT",
            details={"storage_key": storage_key, "reason": reason},
        )


# LLM Exceptions
class LLMError(StockLedgerError):
    """Base exception for LLM operations."""

    pass


class LLMUnavailableError(LLMError):
    """LLM provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMAuthenticationError(LLMError):
    """API key was rejected."""

    def __init__(self, provider: str):
        super().__init__(
            f"API key rejected by {provider}",
            code="LLM_AUTHENTICATION",
            details={"provider": provider},
        )


class LLMRateLimitError(LLMError):
    """Provider rate limit reached."""

    def __init__(self, provider: str, retry_after: str | None = None):
        super().__init__(
            f"Rate limit reached on {provider}, retry later",
            code="LLM_RATE_LIMITED",
            details={"provider": provider, "retry_after": retry_after},
        )


class LLMTimeoutError(LLMError):
    """LLM request timed out."""

    def __init__(self, timeout: int, operation: str = "completion"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """LLM returned invalid or empty response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# Validation Exceptions
class ValidationError(StockLedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(StockLedgerError):
    """A setting is missing or unusable."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            f"Invalid configuration for {setting}: {reason}",
            code="CONFIGURATION_ERROR",
            details={"setting": setting, "reason": reason},
        )
