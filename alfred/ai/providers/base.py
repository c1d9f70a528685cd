"""
Base AI Provider - the contract every language-understanding backend follows.

The intent classifier only needs one thing from an LLM: "given this system
prompt and this user text, give me a JSON document back". Each vendor SDK
does that differently, so each one gets a small provider class behind the
same interface.

Design Pattern: Strategy Pattern
================================
IntentClassifier holds an AIProvider and never imports a vendor SDK.
Swapping OpenAI for Claude or Gemini is a configuration change.

Error contract:
    Providers do NOT raise. Transport and SDK failures come back as an
    AIResponse with success=False and the error text, so the caller decides
    what a failure means.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger("alfred.ai")


class ProviderType(str, Enum):
    """Supported LLM vendors."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


@dataclass
class TokenUsage:
    """Token counts reported by the vendor for one call."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        if self.total_tokens == 0:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


@dataclass
class AIResponse:
    """
    Vendor-neutral result of one LLM call.

    Attributes:
        content: Generated text (a JSON string for generate_json)
        provider: Which vendor produced it
        model: Model name used
        usage: Token usage
        latency_ms: Wall time of the call
        success: False when the call itself failed (network, auth, quota...)
        error: Failure description when success is False
        raw_response: SDK response object, for debugging
    """
    content: str
    provider: ProviderType
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None
    raw_response: Optional[Any] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        preview = self.content[:100] + "..." if len(self.content) > 100 else self.content
        return {
            "content": preview,
            "provider": self.provider.value,
            "model": self.model,
            "tokens": {
                "prompt": self.usage.prompt_tokens,
                "completion": self.usage.completion_tokens,
                "total": self.usage.total_tokens,
            },
            "latency_ms": round(self.latency_ms, 2),
            "success": self.success,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
        }


class AIProvider(ABC):
    """
    Abstract base class for LLM providers.

    Usage:
        provider = OpenAIProvider(api_key="sk-...", model="gpt-4o")
        response = await provider.generate_json(
            prompt="criar tarefa revisar relatório",
            system_prompt=CLASSIFIER_SYSTEM_PROMPT,
        )
        if response.success:
            data = json.loads(response.content)
    """

    provider_type: ProviderType

    def __init__(self, model: str, api_key: str = "", timeout: float = 30.0):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when the SDK client could be created (API key present)."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        """
        Generate free text.

        Must not raise; failures are returned in AIResponse.error.
        """
        pass

    @abstractmethod
    async def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        """
        Generate a JSON document.

        The provider asks the vendor for JSON output but does not promise the
        content parses; the classifier owns that check.
        """
        pass

    def _measure_latency(self, start_time: float) -> float:
        """Calculate latency in milliseconds."""
        return (time.time() - start_time) * 1000

    def _create_error_response(self, error: str, latency_ms: float = 0.0) -> AIResponse:
        """Build the standard failed response and log it."""
        logger.error(f"AI Provider Error [{self.provider_type.value}]: {error}")
        return AIResponse(
            content="",
            provider=self.provider_type,
            model=self.model,
            latency_ms=latency_ms,
            success=False,
            error=error,
        )

    def _not_configured(self, start_time: float) -> AIResponse:
        return self._create_error_response(
            f"{self.provider_type.value} API key not configured",
            latency_ms=self._measure_latency(start_time),
        )

    @staticmethod
    def _strip_code_fence(content: str) -> str:
        """Remove a ```json ... ``` wrapper some models add around JSON."""
        text = content.strip()
        if text.startswith("```"):
            text = text.split("\n", 1)[1] if "\n" in text else ""
            if text.rstrip().endswith("```"):
                text = text.rstrip()[:-3]
        return text.strip()
