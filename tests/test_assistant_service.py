"""
Tests for AssistantService - the full request/response cycle.

The classifier provider is mocked; the store is the in-memory knowledge
base, so every test runs the real extractor, dispatcher and formatter.
"""

from datetime import date, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from alfred.core.config import Settings
from alfred.environments.base import APIError
from alfred.environments.memory import InMemoryKnowledgeBase
from alfred.environments.schemas import ProjectCreate, TaskCreate, TaskStatus
from alfred.services.assistant_service import (
    DEFAULT_SESSION_ID,
    AssistantService,
    build_assistant_service,
)
from alfred.services.command_result import ErrorKind
from alfred.services.response_formatter import (
    APOLOGY_TEXT,
    EMPTY_INPUT_TEXT,
    ERROR_PREFIX,
    HELP_TEXT,
    INPUT_TOO_LONG_TEXT,
)

FIXED_TODAY = date(2025, 1, 15)


class TestInputValidation:
    """Empty and oversized input never reach the classifier."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_empty_input(self, assistant, mock_provider, text):
        reply = await assistant.process(text, session_id="s1")

        assert reply.text == EMPTY_INPUT_TEXT
        assert reply.success is False
        assert reply.error_kind == ErrorKind.USER_ERROR
        mock_provider.generate_json.assert_not_called()
        assert assistant.contexts.get("s1") is None

    @pytest.mark.asyncio
    async def test_too_long_input(self, assistant, mock_provider):
        text = await assistant.handle("a" * 1001)

        assert text == INPUT_TOO_LONG_TEXT
        mock_provider.generate_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_input_at_limit_is_accepted(self, assistant, mock_provider):
        await assistant.handle("a" * 1000)

        mock_provider.generate_json.assert_called_once()


class TestScenarios:

    @pytest.mark.asyncio
    async def test_create_task_with_relative_due_date(self, assistant, mock_provider, memory_kb, make_response):
        mock_provider.generate_json.return_value = make_response(
            "create_task",
            {"title": "revisar relatório", "due_date": "amanhã"},
            response="Vou criar a tarefa.",
        )

        reply = await assistant.process("criar tarefa: revisar relatório até amanhã", session_id="s1")

        assert reply.success is True
        assert reply.intent == "create_task"
        assert reply.action == "create_task"
        assert "revisar relatório" in reply.text
        task = list(memory_kb.tasks.values())[0]
        assert task.title == "revisar relatório"
        assert task.due_date == FIXED_TODAY + timedelta(days=1)
        assert reply.data["title"] == "revisar relatório"

    @pytest.mark.asyncio
    async def test_create_task_derives_title_when_missing(self, assistant, mock_provider, memory_kb, make_response):
        mock_provider.generate_json.return_value = make_response("create_task", {"due_date": "amanhã"})

        await assistant.handle("criar tarefa: revisar relatório até amanhã")

        assert list(memory_kb.tasks.values())[0].title == "revisar relatório"

    @pytest.mark.asyncio
    async def test_create_task_without_entities_keeps_due_date(self, assistant, mock_provider, memory_kb, make_response):
        mock_provider.generate_json.return_value = make_response("create_task", {})

        reply = await assistant.process("criar tarefa: revisar relatório até amanhã")

        assert reply.success is True
        task = list(memory_kb.tasks.values())[0]
        assert task.title == "revisar relatório"
        assert task.due_date == FIXED_TODAY + timedelta(days=1)

    @pytest.mark.asyncio
    async def test_complete_unknown_task_does_not_mutate(self, assistant, mock_provider, memory_kb, make_response):
        mock_provider.generate_json.return_value = make_response("complete_task", {"title": "Reunião X"})

        with patch.object(memory_kb, "update_task", AsyncMock()) as update_task:
            reply = await assistant.process("marcar como concluída: Reunião X")

        assert reply.success is False
        assert reply.error_kind == ErrorKind.USER_ERROR
        assert "não encontrada" in reply.text
        update_task.assert_not_called()

    @pytest.mark.asyncio
    async def test_complete_existing_task(self, assistant, mock_provider, memory_kb, make_response):
        task = await memory_kb.create_task(TaskCreate(title="Reunião com cliente"))
        mock_provider.generate_json.return_value = make_response("complete_task", {"title": "reunião com cliente"})

        text = await assistant.handle("marcar como concluída: reunião com cliente")

        assert text == "🎉 Tarefa \"Reunião com cliente\" marcada como concluída!"
        assert memory_kb.tasks[task.id].status == TaskStatus.DONE

    @pytest.mark.asyncio
    async def test_classifier_failure_returns_apology(self, assistant, mock_provider, make_failure):
        mock_provider.generate_json.return_value = make_failure("Connection timeout")

        reply = await assistant.process("listar tarefas")

        assert reply.text == APOLOGY_TEXT
        assert reply.success is False
        assert reply.error_kind == ErrorKind.CLASSIFIER_ERROR

    @pytest.mark.asyncio
    async def test_classifier_exception_returns_apology(self, assistant, mock_provider):
        mock_provider.generate_json.side_effect = ConnectionError("reset by peer")

        text = await assistant.handle("listar tarefas")

        assert text == APOLOGY_TEXT

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_apology(self, assistant):
        with patch.object(assistant.extractor, "extract", side_effect=RuntimeError("bug")):
            reply = await assistant.process("listar tarefas")

        assert reply.text == APOLOGY_TEXT
        assert reply.error_kind == ErrorKind.INTERNAL_ERROR
        assert "bug" not in reply.text

    @pytest.mark.asyncio
    async def test_store_failure_is_wrapped(self, assistant, mock_provider, memory_kb, make_response):
        mock_provider.generate_json.return_value = make_response("list_tasks")

        with patch.object(memory_kb, "search_tasks", AsyncMock(side_effect=APIError("Bad Gateway", 502))):
            reply = await assistant.process("listar tarefas")

        assert reply.success is False
        assert reply.error_kind == ErrorKind.STORE_ERROR
        assert reply.text.startswith(ERROR_PREFIX)
        assert "Não foi possível listar as tarefas." in reply.text
        assert "Bad Gateway" not in reply.text

    @pytest.mark.asyncio
    async def test_help_intent_renders_help(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("help", response="Posso ajudar!")

        text = await assistant.handle("ajuda")

        assert text == HELP_TEXT

    @pytest.mark.asyncio
    async def test_conversation_relays_reply(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("conversation", response="Olá! Tudo bem?")

        text = await assistant.handle("oi")

        assert text == "Olá! Tudo bem?"

    @pytest.mark.asyncio
    async def test_unknown_intent_uses_default_reply(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("order_pizza")

        reply = await assistant.process("pedir pizza")

        assert reply.success is True
        assert reply.intent == "order_pizza"
        assert reply.text == "Como posso ajudar você?"

    @pytest.mark.asyncio
    async def test_malformed_classifier_output(self, assistant, mock_provider, make_response):
        response = make_response("help")
        response.content = "definitivamente não é JSON"
        mock_provider.generate_json.return_value = response

        reply = await assistant.process("???")

        assert reply.success is True
        assert reply.intent == "conversation"
        assert reply.confidence == 0.5

    @pytest.mark.asyncio
    async def test_dashboard(self, assistant, mock_provider, memory_kb, make_response):
        await memory_kb.create_task(TaskCreate(title="A"))
        mock_provider.generate_json.return_value = make_response("dashboard")

        text = await assistant.handle("mostrar dashboard")

        assert text.startswith("📊 **Dashboard - Resumo**")

    @pytest.mark.asyncio
    async def test_analytics(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("analytics", {"period": "mês"})

        text = await assistant.handle("estatísticas do mês")

        assert "último mês" in text


class TestSessionState:

    @pytest.mark.asyncio
    async def test_turns_are_recorded(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("conversation", response="Olá!")

        await assistant.handle("  oi  ", session_id="s1")

        history = assistant.contexts.get("s1").history
        assert len(history) == 1
        assert history[0].input == "oi"
        assert history[0].output == "Olá!"

    @pytest.mark.asyncio
    async def test_help_turn_records_help_text(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("help", response="Posso ajudar!")

        text = await assistant.handle("ajuda", session_id="s1")

        history = assistant.contexts.get("s1").history
        assert history[0].output == text == HELP_TEXT

    @pytest.mark.asyncio
    async def test_default_session(self, assistant):
        await assistant.handle("oi")

        assert assistant.contexts.get(DEFAULT_SESSION_ID) is not None

    @pytest.mark.asyncio
    async def test_history_bound(self, assistant):
        for i in range(15):
            await assistant.handle(f"mensagem {i}", session_id="s1")

        history = assistant.contexts.get("s1").history
        assert len(history) == 10
        assert [turn.input for turn in history] == [f"mensagem {i}" for i in range(5, 15)]

    @pytest.mark.asyncio
    async def test_history_is_sent_to_classifier(self, assistant, mock_provider):
        await assistant.handle("primeira mensagem", session_id="s1")
        await assistant.handle("segunda mensagem", session_id="s1")

        prompt = mock_provider.generate_json.call_args.kwargs["prompt"]
        assert "primeira mensagem" in prompt

    @pytest.mark.asyncio
    async def test_sessions_do_not_leak(self, assistant, mock_provider):
        await assistant.handle("segredo da alice", session_id="alice")
        await assistant.handle("oi", session_id="bob")

        prompt = mock_provider.generate_json.call_args.kwargs["prompt"]
        assert "segredo da alice" not in prompt

    @pytest.mark.asyncio
    async def test_current_task_is_remembered(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("create_task", {"title": "Revisar"})

        await assistant.handle("criar tarefa revisar", session_id="s1")

        assert assistant.contexts.get("s1").current_task.title == "Revisar"

    @pytest.mark.asyncio
    async def test_current_project_is_remembered(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("create_project", {"project_name": "Website"})

        await assistant.handle("criar projeto Website", session_id="s1")

        assert assistant.contexts.get("s1").current_project.name == "Website"

    @pytest.mark.asyncio
    async def test_failed_command_does_not_set_current_task(self, assistant, mock_provider, make_response):
        mock_provider.generate_json.return_value = make_response("complete_task", {"title": "nada"})

        await assistant.handle("concluir nada", session_id="s1")

        context = assistant.contexts.get("s1")
        assert context.current_task is None
        assert len(context.history) == 1

    @pytest.mark.asyncio
    async def test_clear_session_twice(self, assistant):
        await assistant.handle("oi", session_id="s1")

        assert assistant.clear_session("s1") is True
        assert assistant.clear_session("s1") is False
        assert assistant.contexts.get_or_create("s1").history == []


class TestInfoOperations:

    def test_welcome_and_help(self, assistant):
        assert "Alfred" in assistant.welcome()
        assert assistant.help() == HELP_TEXT

    @pytest.mark.asyncio
    async def test_stats(self, assistant):
        await assistant.handle("oi", session_id="a")
        await assistant.handle("oi", session_id="b")

        stats = assistant.get_stats()

        assert stats["active_sessions"] == 2
        assert stats["total_interactions"] == 2
        assert stats["classifier"]["total_requests"] == 2

    @pytest.mark.asyncio
    async def test_reply_to_dict(self, assistant):
        reply = await assistant.process("oi", session_id="s1")

        data = reply.to_dict()

        assert data["session_id"] == "s1"
        assert data["request_id"]
        assert data["error_kind"] is None
        assert data["processing_time_ms"] >= 0


class TestBuildAssistantService:

    def test_wires_settings(self, memory_kb, mock_provider):
        settings = Settings(MAX_CONTEXT_HISTORY=4, MAX_INPUT_LENGTH=200, DEFAULT_LIST_LIMIT=5)

        service = build_assistant_service(settings, store=memory_kb, provider=mock_provider)

        assert isinstance(service, AssistantService)
        assert service.contexts.max_history == 4
        assert service.max_input_length == 200
        assert service.extractor.default_list_limit == 5
        assert service.dispatcher.store is memory_kb
        assert service.classifier.provider is mock_provider

    def test_builds_configured_backends(self):
        settings = Settings(KNOWLEDGE_BASE_BACKEND="memory", CLASSIFIER_PROVIDER="gemini")

        service = build_assistant_service(settings)

        assert isinstance(service.dispatcher.store, InMemoryKnowledgeBase)
        assert service.classifier.provider.provider_type.value == "gemini"

    @pytest.mark.asyncio
    async def test_aclose_closes_store(self, memory_kb, mock_provider):
        service = build_assistant_service(Settings(), store=memory_kb, provider=mock_provider)

        with patch.object(memory_kb, "aclose", AsyncMock()) as aclose:
            await service.aclose()

        aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_project_scoped_listing(self, memory_kb, mock_provider, make_response):
        project = await memory_kb.create_project(ProjectCreate(name="Website"))
        await memory_kb.create_task(TaskCreate(title="Layout", project_id=project.id))
        await memory_kb.create_task(TaskCreate(title="Outra"))
        service = build_assistant_service(Settings(), store=memory_kb, provider=mock_provider)
        mock_provider.generate_json.return_value = make_response("list_tasks", {"project_name": "website"})

        text = await service.handle("tarefas do projeto website")

        assert text == "📋 Encontrei 1 tarefa(s):\n\n1. Layout (A Fazer) - Média"
