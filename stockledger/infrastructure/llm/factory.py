"""
LLM provider factory.

Returns ``None`` when no usable API key is configured; callers then use
their deterministic fallbacks.
"""

from stockledger.config import get_logger, get_settings
from stockledger.core.interfaces.llm import ILLMProvider

logger = get_logger(__name__)

_provider: ILLMProvider | None = None


def is_ai_enabled() -> bool:
    return get_settings().llm.enabled


def get_llm_provider() -> ILLMProvider | None:
    """Get the shared provider, or ``None`` when AI features are off."""
    global _provider
    if not is_ai_enabled():
        return None
    if _provider is None:
        from stockledger.infrastructure.llm.openai import OpenAIProvider

        _provider = OpenAIProvider()
        logger.info("llm_provider_created", provider=_provider.provider_name)
    return _provider


def reset_llm_provider() -> None:
    """Drop the cached provider (for testing)."""
    global _provider
    _provider = None
