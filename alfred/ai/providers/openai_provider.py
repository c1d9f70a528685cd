"""
OpenAI Provider - GPT client, the default classifier backend.

Uses the async SDK and OpenAI's JSON mode so intent classification comes
back as a single JSON object.

API Documentation: https://platform.openai.com/docs/api-reference
"""

import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from alfred.ai.providers.base import (
    AIProvider,
    AIResponse,
    ProviderType,
    TokenUsage,
)

logger = logging.getLogger("alfred.ai.openai")


class OpenAIProvider(AIProvider):
    """
    OpenAI GPT provider.

    Usage:
        provider = OpenAIProvider(model="gpt-4o", api_key="sk-...")
        response = await provider.generate_json(prompt, system_prompt=...)
    """

    provider_type = ProviderType.OPENAI

    def __init__(self, model: str, api_key: str = "", timeout: float = 30.0):
        super().__init__(model=model, api_key=api_key, timeout=timeout)

        if self.api_key:
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=timeout)
            logger.info(f"OpenAI provider initialized with model: {self.model}")
        else:
            self._client = None
            logger.warning("OpenAI API key not configured - provider unavailable")

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
        return await self._complete(
            prompt,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        system_content = (system_prompt or "") + "\n\nYou must respond with valid JSON only, no explanation."
        return await self._complete(
            prompt,
            system_prompt=system_content,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )

    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
        response_format: Optional[dict] = None,
    ) -> AIResponse:
        """One chat completion call, converted into an AIResponse."""
        start_time = time.time()

        if not self._client:
            return self._not_configured(start_time)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        request_params = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            request_params["response_format"] = response_format

        try:
            response = await self._client.chat.completions.create(**request_params)
        except Exception as e:
            logger.error(f"OpenAI request failed: {e}")
            return self._create_error_response(str(e), latency_ms=self._measure_latency(start_time))

        latency_ms = self._measure_latency(start_time)
        content = response.choices[0].message.content or ""
        usage = TokenUsage(
            prompt_tokens=response.usage.prompt_tokens if response.usage else 0,
            completion_tokens=response.usage.completion_tokens if response.usage else 0,
        )

        logger.info(f"OpenAI request completed in {latency_ms:.0f}ms, tokens: {usage.total_tokens}")

        return AIResponse(
            content=content,
            provider=self.provider_type,
            model=self.model,
            usage=usage,
            latency_ms=latency_ms,
            raw_response=response,
        )
