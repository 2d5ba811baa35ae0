"""
Abstract interface for the hosted language-model provider.

The core never depends on a concrete HTTP client; forecast and report
services accept any ``ILLMProvider``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Response from a chat completion."""

    text: str
    model: str
    finish_reason: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class HealthStatus:
    """LLM provider health status."""

    available: bool
    provider: str
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class ILLMProvider(ABC):
    """Chat-completion provider."""

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
        model: str | None = None,
    ) -> LLMResponse:
        """
        Chat completion with message history.

        Args:
            messages: List of {"role": "user"|"assistant"|"system", "content": "..."}
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            json_mode: Ask the provider for a single JSON object
            model: Override the configured model

        Returns:
            LLMResponse with assistant reply
        """
        pass

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Check if the provider is reachable with the configured key."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Synchronous availability check (cached)."""
        pass
