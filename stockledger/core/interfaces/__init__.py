"""Core interfaces (abstract base classes)."""

from stockledger.core.interfaces.ledger_persistence import STORAGE_KEYS, ILedgerPersistence
from stockledger.core.interfaces.llm import HealthStatus, ILLMProvider, LLMResponse

__all__ = [
    "ILLMProvider",
    "LLMResponse",
    "HealthStatus",
    "ILedgerPersistence",
    "STORAGE_KEYS",
]
