"""
Assistant Service - one request/response cycle per user input.

This is the only component aware of session identity. It wires the
context store, classifier, extractor, dispatcher and formatter together.

Responsibilities:
=================
- Reject empty and oversized input before any external call
- Classify, extract and dispatch
- Record the turn in the session history
- Remember the last task/project a session touched
- Turn every failure into displayable text

NOT Responsible For:
====================
- HTTP request/response handling (router's job)
- Store failure framing (CommandDispatcher's job)
- Vendor-specific LLM calls (providers' job)

Architecture:
=============
```
┌──────────────┐
│    Router    │  ← HTTP only
└──────┬───────┘
       │
       ▼
┌──────────────┐
│  Assistant   │  ← this file
│   Service    │
└──────┬───────┘
       │
   ┌───┴──────────┬──────────────┐
   ▼              ▼              ▼
┌──────────┐ ┌───────────┐ ┌────────────┐
│Classifier│ │ Extractor │ │ Dispatcher │──► Knowledge base
└──────────┘ └───────────┘ └────────────┘
```

Usage:
======
```python
service = build_assistant_service(settings)
text = await service.handle("listar tarefas pendentes", session_id="abc")
```
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from alfred.ai.intent.classifier import ClassifierUnavailableError, IntentClassifier
from alfred.ai.intent.extractor import CommandExtractor
from alfred.ai.intent.schemas import ClassifiedIntent, IntentType
from alfred.ai.monitoring import AIMonitor
from alfred.ai.providers import AIProvider, create_provider
from alfred.core.config import Settings, settings as default_settings
from alfred.environments import KnowledgeBaseClient, create_knowledge_base
from alfred.environments.schemas import Project, Task
from alfred.services.command_dispatcher import CommandDispatcher
from alfred.services.command_result import CommandResult, ErrorKind, _serialize
from alfred.services.conversation_context_service import ConversationContextService
from alfred.services.response_formatter import ResponseFormatter

logger = logging.getLogger("alfred.services.assistant")

DEFAULT_SESSION_ID = "default"


# ---------------------------------------------------------------------------
# RESULT DATACLASS
# ---------------------------------------------------------------------------

@dataclass
class AssistantReply:
    """
    Outcome of one input, converted to JSON by the router.

    Attributes:
        text: Final display text (always non-empty)
        session_id: Session the input belonged to
        request_id: Unique id for log correlation
        intent: Raw classifier label, None when classification never ran
        confidence: Classifier confidence
        action: Executed command action, if any
        success: Whether the request did what was asked
        error_kind: Failure category when success is False
        data: Serialized domain payload of the command result
        processing_time_ms: Wall time of the whole cycle
    """
    text: str
    session_id: str
    request_id: str
    success: bool = True
    intent: Optional[str] = None
    confidence: float = 0.0
    action: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    data: Optional[Any] = None
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "session_id": self.session_id,
            "request_id": self.request_id,
            "success": self.success,
            "intent": self.intent,
            "confidence": self.confidence,
            "action": self.action,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "data": self.data,
            "processing_time_ms": round(self.processing_time_ms, 2),
        }


# ---------------------------------------------------------------------------
# ASSISTANT SERVICE
# ---------------------------------------------------------------------------

class AssistantService:
    """
    Orchestrates the assistant pipeline.

    Collaborators are passed in; build_assistant_service() wires the
    production ones from settings.
    """

    def __init__(
        self,
        contexts: ConversationContextService,
        classifier: IntentClassifier,
        extractor: CommandExtractor,
        dispatcher: CommandDispatcher,
        formatter: Optional[ResponseFormatter] = None,
        max_input_length: int = 1000,
        monitor: Optional[AIMonitor] = None,
    ):
        self.contexts = contexts
        self.classifier = classifier
        self.extractor = extractor
        self.dispatcher = dispatcher
        self.formatter = formatter or ResponseFormatter()
        self.max_input_length = max_input_length
        self.monitor = monitor
        logger.info("Assistant service initialized")

    # -----------------------------------------------------------------------
    # MAIN ENTRY POINTS
    # -----------------------------------------------------------------------

    async def handle(self, text: str, session_id: Optional[str] = None) -> str:
        """Process one input and return only the display text."""
        reply = await self.process(text, session_id)
        return reply.text

    async def process(self, text: str, session_id: Optional[str] = None) -> AssistantReply:
        """
        Process one input.

        Sequence: validate -> context -> classify -> extract -> dispatch ->
        append history -> update subjects -> format.

        Never raises; every failure becomes an AssistantReply with
        success=False and displayable text.
        """
        start_time = time.time()
        request_id = str(uuid.uuid4())
        session_id = session_id or DEFAULT_SESSION_ID
        text = text or ""

        # Local validation short-circuit: no classifier or store call, no history
        rejection = self._validate_input(text)
        if rejection is not None:
            logger.info(f"[{request_id}] Input rejected: {rejection}")
            return self._reply(
                text=self._rejection_text(rejection),
                session_id=session_id,
                request_id=request_id,
                start_time=start_time,
                success=False,
                error_kind=ErrorKind.USER_ERROR,
            )

        text = text.strip()
        logger.info(f"[{request_id}] Processing input for session {session_id[:8]}: {text[:50]}")

        try:
            context = self.contexts.get_or_create(session_id)

            classified = await self.classifier.classify(text, context, request_id=request_id)
            command = self.extractor.extract(text, classified)
            result = await self.dispatcher.execute(
                command,
                reply=self._reply_for(classified),
                request_id=request_id,
            )

            self.contexts.append(session_id, text, result.message)
            self._update_subjects(session_id, result)

            return self._reply(
                text=self.formatter.render(result, classified.intent_type),
                session_id=session_id,
                request_id=request_id,
                start_time=start_time,
                success=result.success,
                intent=classified.intent,
                confidence=classified.confidence,
                action=result.action,
                error_kind=result.error_kind,
                data=_serialize(result.data),
            )

        except ClassifierUnavailableError as e:
            logger.error(f"[{request_id}] Classifier unavailable: {e}", exc_info=True)
            return self._apology(session_id, request_id, start_time, ErrorKind.CLASSIFIER_ERROR)

        except Exception as e:
            logger.error(f"[{request_id}] Assistant processing failed: {e}", exc_info=True)
            return self._apology(session_id, request_id, start_time, ErrorKind.INTERNAL_ERROR)

    # -----------------------------------------------------------------------
    # SESSION / INFO OPERATIONS
    # -----------------------------------------------------------------------

    def welcome(self) -> str:
        return self.formatter.welcome_text()

    def help(self) -> str:
        return self.formatter.help_text()

    def clear_session(self, session_id: str) -> bool:
        return self.contexts.clear(session_id)

    def get_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = dict(self.contexts.get_stats())
        if self.monitor:
            stats["classifier"] = self.monitor.get_stats()
        return stats

    # -----------------------------------------------------------------------
    # HELPERS
    # -----------------------------------------------------------------------

    def _validate_input(self, text: str) -> Optional[str]:
        if not text.strip():
            return "empty"
        if len(text) > self.max_input_length:
            return "too_long"
        return None

    def _rejection_text(self, rejection: str) -> str:
        if rejection == "empty":
            return self.formatter.empty_input_text()
        return self.formatter.input_too_long_text()

    def _reply_for(self, classified: ClassifiedIntent) -> Optional[str]:
        # Help is answered with the fixed help text, so history records what was shown
        if classified.intent_type == IntentType.HELP:
            return self.formatter.help_text()
        return classified.reply

    def _update_subjects(self, session_id: str, result: CommandResult) -> None:
        """Remember the task or project a successful command returned."""
        if not result.success:
            return
        if isinstance(result.data, Task):
            self.contexts.set_current_task(session_id, result.data)
        elif isinstance(result.data, Project):
            self.contexts.set_current_project(session_id, result.data)

    def _apology(
        self,
        session_id: str,
        request_id: str,
        start_time: float,
        error_kind: ErrorKind,
    ) -> AssistantReply:
        return self._reply(
            text=self.formatter.apology_text(),
            session_id=session_id,
            request_id=request_id,
            start_time=start_time,
            success=False,
            error_kind=error_kind,
        )

    @staticmethod
    def _reply(session_id: str, request_id: str, start_time: float, **kwargs) -> AssistantReply:
        return AssistantReply(
            session_id=session_id,
            request_id=request_id,
            processing_time_ms=(time.time() - start_time) * 1000,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self.dispatcher.store.aclose()


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------

def build_assistant_service(
    settings: Optional[Settings] = None,
    store: Optional[KnowledgeBaseClient] = None,
    provider: Optional[AIProvider] = None,
) -> AssistantService:
    """
    Construct the whole assistant core from settings.

    Called once per process (the FastAPI lifespan does it). store and
    provider can be passed in to replace the configured backends.
    """
    settings = settings or default_settings

    store = store or create_knowledge_base(settings)
    provider = provider or create_provider(settings=settings)
    monitor = AIMonitor()
    formatter = ResponseFormatter()

    classifier = IntentClassifier(
        provider=provider,
        monitor=monitor,
        history_turns=settings.CLASSIFIER_HISTORY_TURNS,
        temperature=settings.CLASSIFIER_TEMPERATURE,
        max_tokens=settings.CLASSIFIER_MAX_TOKENS,
    )

    logger.info(
        f"Building assistant: provider={provider.provider_type.value}, "
        f"store={store.backend_name}"
    )

    return AssistantService(
        contexts=ConversationContextService(max_history=settings.MAX_CONTEXT_HISTORY),
        classifier=classifier,
        extractor=CommandExtractor(default_list_limit=settings.DEFAULT_LIST_LIMIT),
        dispatcher=CommandDispatcher(store, formatter, list_limit=settings.DEFAULT_LIST_LIMIT),
        formatter=formatter,
        max_input_length=settings.MAX_INPUT_LENGTH,
        monitor=monitor,
    )
