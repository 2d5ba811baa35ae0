"""Infrastructure layer implementations."""

from stockledger.infrastructure import llm, storage

__all__ = ["storage", "llm"]
