"""
Intent Classifier - asks an LLM what the user wants.

The classifier:
1. Takes the raw text and the session's conversation context
2. Builds a prompt with the intent taxonomy, the entity vocabulary and the
   last few turns of history
3. Calls the configured provider in JSON mode
4. Validates the JSON into a ClassifiedIntent

Failure policy:
- Output that is not a JSON object is recovered locally into a low
  confidence "conversation" intent with a clarifying reply.
- A provider that could not be reached (AIResponse.success is False, or
  an exception from the provider) raises ClassifierUnavailableError; the
  assistant service turns that into its apology message.
"""

import json
import logging
import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import ValidationError

from alfred.ai.intent.schemas import ClassifiedIntent, IntentType
from alfred.ai.monitoring import AIMonitor
from alfred.ai.prompts.intent_prompts import (
    build_classifier_prompt,
    build_classifier_system_prompt,
)
from alfred.ai.providers.base import AIProvider

if TYPE_CHECKING:
    from alfred.services.conversation_context_service import ConversationContext

logger = logging.getLogger("alfred.ai.intent")

FALLBACK_CONFIDENCE = 0.5
FALLBACK_REPLY = "Entendi sua mensagem, mas preciso de mais clareza para ajudar melhor."


class ClassifierUnavailableError(Exception):
    """Raised when the language-understanding provider call itself failed."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class IntentClassifier:
    """
    Classifies user text into a ClassifiedIntent.

    Usage:
        classifier = IntentClassifier(provider=create_provider("openai"))
        intent = await classifier.classify("criar tarefa revisar relatório", context)

        if intent.intent_type == IntentType.CREATE_TASK:
            ...
    """

    def __init__(
        self,
        provider: AIProvider,
        monitor: Optional[AIMonitor] = None,
        history_turns: int = 3,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ):
        self.provider = provider
        self.monitor = monitor
        self.history_turns = history_turns
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._system_prompt = build_classifier_system_prompt()

    async def classify(
        self,
        text: str,
        context: Optional["ConversationContext"] = None,
        request_id: Optional[str] = None,
    ) -> ClassifiedIntent:
        """
        Classify one user input.

        Args:
            text: The user's message
            context: Session context; its most recent turns go into the prompt
            request_id: Correlation id for logs and monitor records

        Returns:
            ClassifiedIntent (a fallback conversation intent on bad output)

        Raises:
            ClassifierUnavailableError: If the provider call failed
        """
        start_time = time.time()
        log_prefix = f"[{request_id}] " if request_id else ""

        prompt = build_classifier_prompt(request=text, history=self._history_json(context))

        try:
            response = await self.provider.generate_json(
                prompt=prompt,
                system_prompt=self._system_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            # Providers report failures in AIResponse; this covers ones that raise anyway
            logger.error(f"{log_prefix}Classifier provider raised: {e}")
            provider_type = getattr(self.provider, "provider_type", None)
            raise ClassifierUnavailableError(
                str(e) or type(e).__name__,
                provider=provider_type.value if provider_type else None,
            ) from e

        if self.monitor:
            self.monitor.track_response(request_id or "-", response, metadata={"stage": "classify"})

        if not response.success:
            logger.warning(f"{log_prefix}Classifier provider failed: {response.error}")
            raise ClassifierUnavailableError(
                response.error or "Classifier provider failed",
                provider=response.provider.value,
            )

        intent = self.parse_response(response.content)

        processing_time = (time.time() - start_time) * 1000
        logger.info(
            f"{log_prefix}Classified as {intent.intent} "
            f"(confidence={intent.confidence:.2f}) in {processing_time:.0f}ms"
        )
        return intent

    def parse_response(self, content: str) -> ClassifiedIntent:
        """Validate raw provider output, falling back on anything unusable."""
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Classifier returned invalid JSON: {e}")
            return self.fallback_intent()

        if not isinstance(data, dict):
            logger.warning(f"Classifier returned {type(data).__name__}, expected an object")
            return self.fallback_intent()

        try:
            return ClassifiedIntent(
                intent=data.get("intent"),
                entities=data.get("entities") or {},
                confidence=data.get("confidence", 0.0),
                reply=data.get("response", data.get("reply")),
            )
        except ValidationError as e:
            logger.warning(f"Classifier output failed validation: {e}")
            return self.fallback_intent()

    @staticmethod
    def fallback_intent() -> ClassifiedIntent:
        return ClassifiedIntent(
            intent=IntentType.CONVERSATION.value,
            confidence=FALLBACK_CONFIDENCE,
            reply=FALLBACK_REPLY,
        )

    def _history_json(self, context: Optional["ConversationContext"]) -> str:
        """Serialize the last `history_turns` turns as a JSON array."""
        turns: List[Dict[str, Any]] = []
        if context is not None and self.history_turns > 0:
            for turn in context.history[-self.history_turns:]:
                turns.append({
                    "input": turn.input,
                    "output": turn.output,
                    "timestamp": turn.timestamp.isoformat(),
                })
        return json.dumps(turns, ensure_ascii=False)
