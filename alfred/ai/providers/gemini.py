"""
Gemini Provider - Google Gemini client (google-genai SDK).

Gemini supports a native JSON response MIME type, which generate_json uses.
Calls go through the SDK's async surface (client.aio) so they never block
the event loop.
"""

import logging
import time
from typing import Optional

from google import genai
from google.genai import types

from alfred.ai.providers.base import (
    AIProvider,
    AIResponse,
    ProviderType,
    TokenUsage,
)

logger = logging.getLogger("alfred.ai.gemini")


class GeminiProvider(AIProvider):
    """Google Gemini provider."""

    provider_type = ProviderType.GEMINI

    def __init__(self, model: str, api_key: str = "", timeout: float = 30.0):
        super().__init__(model=model, api_key=api_key, timeout=timeout)

        if self.api_key:
            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini provider initialized with model: {self.model}")
        else:
            self._client = None
            logger.warning("Gemini API key not configured - provider unavailable")

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
        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            system_instruction=system_prompt,
        )
        return await self._generate_content(prompt, config)

    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json",
            system_instruction=system_prompt,
        )
        response = await self._generate_content(prompt, config)
        if response.success:
            response.content = self._strip_code_fence(response.content)
        return response

    async def _generate_content(self, prompt: str, config: "types.GenerateContentConfig") -> AIResponse:
        start_time = time.time()

        if not self._client:
            return self._not_configured(start_time)

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            return self._create_error_response(str(e), latency_ms=self._measure_latency(start_time))

        latency_ms = self._measure_latency(start_time)
        usage = self._extract_usage(response)

        logger.info(f"Gemini request completed in {latency_ms:.0f}ms, tokens: {usage.total_tokens}")

        return AIResponse(
            content=response.text or "",
            provider=self.provider_type,
            model=self.model,
            usage=usage,
            latency_ms=latency_ms,
            raw_response=response,
        )

    def _extract_usage(self, response) -> TokenUsage:
        # usage_metadata can be None when the API does not report usage
        metadata = response.usage_metadata
        if not metadata:
            return TokenUsage()
        return TokenUsage(
            prompt_tokens=metadata.prompt_token_count or 0,
            completion_tokens=metadata.candidates_token_count or 0,
        )
