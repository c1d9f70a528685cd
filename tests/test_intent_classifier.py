"""
Tests for the intent classifier and ClassifiedIntent validation.

The provider is always mocked: tests are fast, free and deterministic.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from alfred.ai.intent.classifier import (
    FALLBACK_CONFIDENCE,
    FALLBACK_REPLY,
    ClassifierUnavailableError,
    IntentClassifier,
)
from alfred.ai.intent.schemas import ClassifiedIntent, IntentType
from alfred.ai.monitoring import AIMonitor
from alfred.ai.prompts import build_classifier_prompt, build_classifier_system_prompt
from alfred.services.conversation_context_service import ConversationContextService


class TestClassifiedIntent:
    """Validation rules applied to raw classifier output."""

    def test_known_label_sets_intent_type(self):
        intent = ClassifiedIntent(intent="create_task", confidence=0.9)

        assert intent.intent_type == IntentType.CREATE_TASK

    def test_label_is_normalized(self):
        intent = ClassifiedIntent(intent="  LIST_TASKS ")

        assert intent.intent == "list_tasks"
        assert intent.intent_type == IntentType.LIST_TASKS

    def test_unknown_label_is_kept_without_type(self):
        intent = ClassifiedIntent(intent="order_pizza")

        assert intent.intent == "order_pizza"
        assert intent.intent_type is None

    @pytest.mark.parametrize("raw, expected", [
        (1.7, 1.0),
        (-0.2, 0.0),
        ("0.8", 0.8),
        ("alta", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
    ])
    def test_confidence_is_clamped(self, raw, expected):
        assert ClassifiedIntent(intent="help", confidence=raw).confidence == expected

    def test_non_mapping_entities_become_empty(self):
        intent = ClassifiedIntent(intent="create_task", entities=["title"])

        assert intent.entities == {}

    def test_blank_reply_becomes_none(self):
        assert ClassifiedIntent(intent="help", reply="   ").reply is None


class TestPrompts:
    """Prompt construction."""

    def test_system_prompt_lists_every_intent(self):
        prompt = build_classifier_system_prompt()

        for intent_type in IntentType:
            assert intent_type.value in prompt

    def test_user_prompt_contains_history_and_request(self):
        prompt = build_classifier_prompt(request="listar tarefas", history="[]")

        assert "listar tarefas" in prompt
        assert "[]" in prompt


class TestParseResponse:
    """IntentClassifier.parse_response recovers from unusable output."""

    @pytest.fixture
    def classifier(self):
        return IntentClassifier(provider=MagicMock())

    def test_valid_json(self, classifier):
        content = json.dumps({
            "intent": "create_task",
            "entities": {"title": "Revisar relatório"},
            "confidence": 0.95,
            "response": "Vou criar a tarefa.",
        })

        intent = classifier.parse_response(content)

        assert intent.intent_type == IntentType.CREATE_TASK
        assert intent.entities == {"title": "Revisar relatório"}
        assert intent.confidence == 0.95
        assert intent.reply == "Vou criar a tarefa."

    def test_reply_key_is_accepted(self, classifier):
        intent = classifier.parse_response('{"intent": "help", "reply": "Posso ajudar."}')

        assert intent.reply == "Posso ajudar."

    def test_invalid_json_falls_back(self, classifier):
        intent = classifier.parse_response("Claro! Vou criar a tarefa.")

        assert intent.intent_type == IntentType.CONVERSATION
        assert intent.confidence == FALLBACK_CONFIDENCE
        assert intent.reply == FALLBACK_REPLY

    def test_non_object_json_falls_back(self, classifier):
        intent = classifier.parse_response('["create_task"]')

        assert intent.intent_type == IntentType.CONVERSATION
        assert intent.reply == FALLBACK_REPLY

    def test_missing_intent_means_conversation(self, classifier):
        intent = classifier.parse_response('{"confidence": 0.4}')

        assert intent.intent_type == IntentType.CONVERSATION


class TestClassify:
    """IntentClassifier.classify with a mocked provider."""

    @pytest.mark.asyncio
    async def test_classify_success(self, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response(
            "list_tasks", {"status": "pendente"}, confidence=0.9
        )
        classifier = IntentClassifier(provider=mock_provider)

        intent = await classifier.classify("listar tarefas pendentes")

        assert intent.intent_type == IntentType.LIST_TASKS
        assert intent.entities["status"] == "pendente"

    @pytest.mark.asyncio
    async def test_classify_passes_settings_to_provider(self, mock_provider):
        classifier = IntentClassifier(provider=mock_provider, temperature=0.3, max_tokens=2000)

        await classifier.classify("oi")

        kwargs = mock_provider.generate_json.call_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 2000
        assert "create_task" in kwargs["system_prompt"]
        assert "oi" in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_provider_failure_raises(self, mock_provider, make_failure):
        mock_provider.generate_json.return_value = make_failure("Rate limit exceeded")
        classifier = IntentClassifier(provider=mock_provider)

        with pytest.raises(ClassifierUnavailableError) as exc_info:
            await classifier.classify("listar tarefas")

        assert "Rate limit" in str(exc_info.value)
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_prompt_contains_only_recent_history(self, mock_provider):
        contexts = ConversationContextService()
        for i in range(5):
            contexts.append("s", f"pergunta {i}", f"resposta {i}")
        classifier = IntentClassifier(provider=mock_provider, history_turns=3)

        await classifier.classify("e agora?", contexts.get("s"))

        prompt = mock_provider.generate_json.call_args.kwargs["prompt"]
        assert "pergunta 1" not in prompt
        assert "pergunta 2" in prompt
        assert "pergunta 4" in prompt

    @pytest.mark.asyncio
    async def test_monitor_tracks_calls(self, mock_provider, make_failure):
        monitor = AIMonitor()
        classifier = IntentClassifier(provider=mock_provider, monitor=monitor)

        await classifier.classify("oi", request_id="req-1")
        mock_provider.generate_json.return_value = make_failure()
        with pytest.raises(ClassifierUnavailableError):
            await classifier.classify("oi", request_id="req-2")

        stats = monitor.get_stats()
        assert stats["total_requests"] == 2
        assert stats["successful_requests"] == 1
        assert stats["failed_requests"] == 1
        assert [m.request_id for m in monitor.get_recent()] == ["req-1", "req-2"]

    @pytest.mark.asyncio
    async def test_unparseable_output_does_not_raise(self, make_response):
        provider = MagicMock()
        provider.generate_json = AsyncMock(return_value=make_response("help"))
        provider.generate_json.return_value.content = "not json"
        classifier = IntentClassifier(provider=provider)

        intent = await classifier.classify("???")

        assert intent.intent_type == IntentType.CONVERSATION
        assert intent.reply == FALLBACK_REPLY
