"""
AI Providers Module - interchangeable LLM backends for the intent classifier.

Each provider exposes the same interface:
    response = await provider.generate_json(prompt, system_prompt=...)

Providers are built explicitly with create_provider() and handed to the
classifier; there are no module-level provider instances.
"""

from typing import Optional

from alfred.core.config import Settings, settings as default_settings
from alfred.ai.providers.base import AIProvider, AIResponse, ProviderType, TokenUsage
from alfred.ai.providers.openai_provider import OpenAIProvider
from alfred.ai.providers.anthropic_provider import AnthropicProvider
from alfred.ai.providers.gemini import GeminiProvider


def create_provider(name: Optional[str] = None, settings: Optional[Settings] = None) -> AIProvider:
    """
    Build the provider named in settings (or explicitly).

    Args:
        name: "openai", "anthropic" or "gemini" (default: CLASSIFIER_PROVIDER)
        settings: Settings to read keys and models from

    Raises:
        ValueError: If the provider name is not supported
    """
    settings = settings or default_settings
    name = (name or settings.CLASSIFIER_PROVIDER).lower()
    timeout = settings.AI_REQUEST_TIMEOUT

    if name == ProviderType.OPENAI.value:
        return OpenAIProvider(model=settings.OPENAI_MODEL, api_key=settings.OPENAI_API_KEY, timeout=timeout)
    if name == ProviderType.ANTHROPIC.value:
        return AnthropicProvider(model=settings.ANTHROPIC_MODEL, api_key=settings.ANTHROPIC_API_KEY, timeout=timeout)
    if name == ProviderType.GEMINI.value:
        return GeminiProvider(model=settings.GEMINI_MODEL, api_key=settings.GEMINI_API_KEY, timeout=timeout)

    raise ValueError(f"Unsupported classifier provider: {name}")


__all__ = [
    "AIProvider",
    "AIResponse",
    "ProviderType",
    "TokenUsage",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "create_provider",
]
