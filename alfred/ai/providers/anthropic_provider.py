"""
Anthropic Provider - Claude client for intent classification.

Claude has no dedicated JSON mode, so generate_json adds a strict
instruction to the system prompt and strips any code fence from the reply.

API Documentation: https://docs.anthropic.com/en/api
"""

import logging
import time
from typing import Optional

from anthropic import AsyncAnthropic

from alfred.ai.providers.base import (
    AIProvider,
    AIResponse,
    ProviderType,
    TokenUsage,
)

logger = logging.getLogger("alfred.ai.anthropic")


class AnthropicProvider(AIProvider):
    """Anthropic Claude provider."""

    provider_type = ProviderType.ANTHROPIC

    def __init__(self, model: str, api_key: str = "", timeout: float = 30.0):
        super().__init__(model=model, api_key=api_key, timeout=timeout)

        if self.api_key:
            self._client = AsyncAnthropic(api_key=self.api_key, timeout=timeout)
            logger.info(f"Anthropic provider initialized with model: {self.model}")
        else:
            self._client = None
            logger.warning("Anthropic API key not configured - provider unavailable")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        return await self._message(prompt, system_prompt, temperature, max_tokens)

    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        system_content = (
            (system_prompt or "")
            + "\n\nRespond with a single valid JSON object only. No prose, no markdown."
        )
        response = await self._message(prompt, system_content, temperature, max_tokens)
        if response.success:
            response.content = self._strip_code_fence(response.content)
        return response

    async def _message(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
    ) -> AIResponse:
        start_time = time.time()

        if not self._client:
            return self._not_configured(start_time)

        request_params = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            request_params["system"] = system_prompt

        try:
            response = await self._client.messages.create(**request_params)
        except Exception as e:
            logger.error(f"Anthropic request failed: {e}")
            return self._create_error_response(str(e), latency_ms=self._measure_latency(start_time))

        latency_ms = self._measure_latency(start_time)

        # Claude returns a list of content blocks; only text blocks matter here
        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        usage = TokenUsage(
            prompt_tokens=response.usage.input_tokens if response.usage else 0,
            completion_tokens=response.usage.output_tokens if response.usage else 0,
        )

        logger.info(f"Anthropic request completed in {latency_ms:.0f}ms, tokens: {usage.total_tokens}")

        return AIResponse(
            content=content,
            provider=self.provider_type,
            model=self.model,
            usage=usage,
            latency_ms=latency_ms,
            raw_response=response,
        )
