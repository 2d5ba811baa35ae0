"""
OpenAI-compatible chat-completions provider.

Talks to ``{base_url}/chat/completions`` over httpx; any server that speaks
the same protocol works.
"""

import time

import httpx

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import (
    ConfigurationError,
    LLMAuthenticationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMUnavailableError,
)
from stockledger.core.interfaces.llm import HealthStatus, LLMResponse
from stockledger.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """Chat completions over the OpenAI HTTP API."""

    provider_name = "openai"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__()
        settings = get_settings().llm
        if not settings.enabled:
            raise ConfigurationError("LLM_API_KEY", "an OpenAI key starting with 'sk-' is required")
        self.base_url = settings.base_url.rstrip("/")
        self.api_key = settings.api_key
        self.model = settings.model_name
        self.timeout = settings.timeout
        self.max_tokens = settings.max_tokens
        self.temperature = settings.temperature
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _post(self, endpoint: str, payload: dict) -> dict:
        async with self._client() as client:
            response = await client.post(endpoint, json=payload)

        if response.status_code == 401:
            raise LLMAuthenticationError(self.provider_name)
        if response.status_code == 429:
            raise LLMRateLimitError(self.provider_name, response.headers.get("retry-after"))
        if response.status_code != 200:
            raise LLMUnavailableError(
                self.provider_name, f"HTTP {response.status_code}: {response.text[:200]}"
            )
        return response.json()

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
        model: str | None = None,
    ) -> LLMResponse:
        payload: dict = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        async def _do_chat() -> LLMResponse:
            start_time = time.time()
            result = await self._post("/chat/completions", payload)
            elapsed = time.time() - start_time

            choices = result.get("choices") or []
            message = choices[0].get("message", {}) if choices else {}
            text = message.get("content") or ""
            if not text.strip():
                raise LLMResponseError("Empty completion", str(result))

            usage = result.get("usage") or {}
            logger.info(
                "openai_chat",
                model=payload["model"],
                messages=len(messages),
                response_len=len(text),
                elapsed_ms=int(elapsed * 1000),
            )
            return LLMResponse(
                text=text,
                model=result.get("model", payload["model"]),
                finish_reason=choices[0].get("finish_reason"),
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            )

        return await self._with_resilience(_do_chat)

    async def check_health(self) -> HealthStatus:
        start = time.time()
        try:
            async with self._client() as client:
                response = await client.get("/models")
            available = response.status_code == 200
            status = HealthStatus(
                available=available,
                provider=self.provider_name,
                model=self.model,
                error=None if available else f"HTTP {response.status_code}",
                response_time_ms=(time.time() - start) * 1000,
            )
        except httpx.HTTPError as e:
            status = HealthStatus(
                available=False,
                provider=self.provider_name,
                model=self.model,
                error=str(e),
            )

        self._update_health_cache(status)
        return status
