"""LLM infrastructure implementations."""

from stockledger.core.interfaces.llm import ILLMProvider
from stockledger.infrastructure.llm.base import BaseLLMProvider, CircuitBreakerState
from stockledger.infrastructure.llm.factory import (
    get_llm_provider,
    is_ai_enabled,
    reset_llm_provider,
)
from stockledger.infrastructure.llm.openai import OpenAIProvider

__all__ = [
    # Interface
    "ILLMProvider",
    # Base
    "BaseLLMProvider",
    "CircuitBreakerState",
    # OpenAI-compatible
    "OpenAIProvider",
    # Factory
    "get_llm_provider",
    "is_ai_enabled",
    "reset_llm_provider",
]
