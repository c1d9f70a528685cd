"""
Tests for ResponseFormatter - user-facing text.
"""

from datetime import date

import pytest

from alfred.ai.intent.schemas import IntentType
from alfred.environments.schemas import (
    DashboardSummary,
    Note,
    Priority,
    ProductivityStats,
    Task,
    TaskStatus,
)
from alfred.services.command_result import CommandResult, ErrorKind
from alfred.services.response_formatter import (
    APOLOGY_TEXT,
    ERROR_PREFIX,
    HELP_TEXT,
    ResponseFormatter,
)


@pytest.fixture
def formatter():
    return ResponseFormatter()


class TestFixedTemplates:

    def test_help_text_mentions_every_area(self, formatter):
        text = formatter.help_text()

        for section in ("Tarefas", "Notas", "Projetos", "Análises"):
            assert section in text

    def test_welcome_text(self, formatter):
        assert "Alfred" in formatter.welcome_text()

    def test_error_text_with_details(self, formatter):
        text = formatter.error_text("Não foi possível criar a tarefa.")

        assert text.startswith(ERROR_PREFIX)
        assert "Detalhes: Não foi possível criar a tarefa." in text

    def test_error_text_without_details(self, formatter):
        text = formatter.error_text()

        assert text.startswith(ERROR_PREFIX)
        assert "Detalhes" not in text

    def test_templates_are_stable(self, formatter):
        assert formatter.apology_text() == APOLOGY_TEXT
        assert formatter.apology_text() == formatter.apology_text()


class TestRender:

    def test_help_intent_always_renders_help(self, formatter):
        result = CommandResult.ok("Posso ajudar com tarefas.")

        assert formatter.render(result, IntentType.HELP) == HELP_TEXT

    def test_success_renders_message(self, formatter):
        result = CommandResult.ok("✅ Tarefa \"x\" criada com sucesso!")

        assert formatter.render(result, IntentType.CREATE_TASK) == result.message

    def test_user_error_renders_message(self, formatter):
        result = CommandResult.fail(
            "Tarefa \"x\" não encontrada.",
            error="Tarefa não encontrada",
            error_kind=ErrorKind.USER_ERROR,
        )

        assert formatter.render(result) == "Tarefa \"x\" não encontrada."

    def test_store_error_is_wrapped_without_diagnostic(self, formatter):
        result = CommandResult.fail(
            "Não foi possível criar a tarefa.",
            error="API request failed: 502 Bad Gateway",
            error_kind=ErrorKind.STORE_ERROR,
        )

        text = formatter.render(result, IntentType.CREATE_TASK)

        assert text.startswith(ERROR_PREFIX)
        assert "Não foi possível criar a tarefa." in text
        assert "502" not in text

    def test_failure_message_is_not_shown_as_details(self, formatter):
        result = CommandResult.fail(
            "Não foi possível listar as tarefas.",
            error="boom",
            error_kind=ErrorKind.INTERNAL_ERROR,
        )

        text = formatter.render(result, IntentType.LIST_TASKS)

        assert text == formatter.failure_text("Não foi possível listar as tarefas.")
        assert "Detalhes" not in text
        assert text.count("Não foi possível") == 1


class TestRecordRendering:

    def test_task_line(self, formatter):
        task = Task(id="1", title="Revisar", status=TaskStatus.IN_PROGRESS, priority=Priority.HIGH)

        assert formatter.task_line(1, task) == "1. Revisar (Em Andamento) - Alta"

    def test_task_line_without_status_or_priority(self, formatter):
        task = Task(id="1", title="Revisar", status=None, priority=None)

        assert formatter.task_line(3, task) == "3. Revisar (sem status) - sem prioridade"

    def test_task_list_uses_total(self, formatter):
        tasks = [Task(id="1", title="A", priority=Priority.LOW)]

        text = formatter.task_list_text(7, tasks)

        assert text == "📋 Encontrei 7 tarefa(s):\n\n1. A (A Fazer) - Baixa"

    def test_note_list(self, formatter):
        notes = [Note(id="1", title="Python", tags=["dev", "estudo"]), Note(id="2", title="Receitas")]

        text = formatter.note_list_text(2, notes)

        assert text == "📚 Encontrei 2 nota(s):\n\n1. Python [dev, estudo]\n2. Receitas"

    def test_dashboard_text(self, formatter):
        summary = DashboardSummary(
            total_tasks=6,
            pending_tasks=3,
            in_progress_tasks=1,
            completed_tasks=2,
            overdue_tasks=1,
            today_tasks=2,
            completed_today=1,
            active_projects=2,
            total_notes=5,
        )

        text = formatter.dashboard_text(summary)

        assert "• A fazer: 3" in text
        assert "• Em progresso: 1" in text
        assert "• Concluídas: 2" in text
        assert "• Atrasadas: 1" in text
        assert "• Para hoje: 2" in text
        assert "**Notas:** 5" in text
        assert "**Projetos ativos:** 2" in text
        assert "1 tarefas concluídas" in text

    @pytest.mark.parametrize("period, label", [
        ("day", "último dia"),
        ("week", "última semana"),
        ("month", "último mês"),
    ])
    def test_analytics_period_labels(self, formatter, period, label):
        stats = ProductivityStats(period=period, days=1)

        assert f"Estatísticas ({label})" in formatter.analytics_text(stats)

    def test_analytics_uses_decimal_comma(self, formatter):
        stats = ProductivityStats(period="week", days=7, tasks_completed=10, average_tasks_per_day=1.4)

        text = formatter.analytics_text(stats)

        assert "**Tarefas concluídas:** 10" in text
        assert "**Média diária:** 1,4 tarefas concluídas" in text

    def test_rendering_is_deterministic(self, formatter):
        task = Task(id="1", title="A", due_date=date(2025, 1, 1))

        assert formatter.task_list_text(1, [task]) == formatter.task_list_text(1, [task])
