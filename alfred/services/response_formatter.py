"""
Response Formatter - every user-facing text the assistant produces.

Pure functions over fixed templates: no I/O, no randomness. Values are
only interpolated, so the same input always renders the same text.

Handlers use the list/dashboard/analytics renderers to compose their
result messages; the assistant service uses render() to pick the final
text for a CommandResult.
"""

from typing import List, Optional

from alfred.ai.intent.schemas import IntentType
from alfred.environments.schemas import DashboardSummary, Note, ProductivityStats, Task
from alfred.services.command_result import CommandResult, ErrorKind

HELP_TEXT = (
    "🤖 **Alfred - Assistente de Produtividade**\n\n"
    "Aqui estão algumas coisas que posso fazer por você:\n\n"
    "📋 **Tarefas:**\n"
    "• \"Criar tarefa: Revisar relatório\"\n"
    "• \"Marcar como concluída: Reunião com cliente\"\n"
    "• \"Listar tarefas pendentes\"\n"
    "• \"Tarefas de alta prioridade\"\n\n"
    "📝 **Notas:**\n"
    "• \"Criar nota sobre reunião\"\n"
    "• \"Buscar notas sobre projeto X\"\n\n"
    "🚀 **Projetos:**\n"
    "• \"Criar projeto: Website da empresa\"\n\n"
    "📊 **Análises:**\n"
    "• \"Mostrar dashboard\"\n"
    "• \"Estatísticas da semana\"\n\n"
    "Digite sua solicitação em linguagem natural e eu cuidarei do resto! 😊"
)

WELCOME_TEXT = (
    "👋 Olá! Eu sou o Alfred, seu assistente de produtividade.\n\n"
    "Estou aqui para ajudar você a gerenciar suas tarefas, notas e projetos no Notion.\n"
    "Digite \"ajuda\" para ver o que posso fazer ou comece fazendo uma solicitação!"
)

ERROR_PREFIX = "😅 Ops! Algo deu errado.\n\n"
EMPTY_INPUT_TEXT = "Por favor, digite algo para eu poder ajudar."
INPUT_TOO_LONG_TEXT = "Sua mensagem é muito longa. Tente ser mais conciso."
APOLOGY_TEXT = "Desculpe, não consegui entender sua solicitação. Pode reformular?"

PERIOD_LABELS = {
    "day": "último dia",
    "week": "última semana",
    "month": "último mês",
}


class ResponseFormatter:
    """Renders templates and command results into display text."""

    # -----------------------------------------------------------------------
    # FIXED TEMPLATES
    # -----------------------------------------------------------------------

    def help_text(self) -> str:
        return HELP_TEXT

    def welcome_text(self) -> str:
        return WELCOME_TEXT

    def error_text(self, error: Optional[str] = None) -> str:
        if error:
            return (
                ERROR_PREFIX
                + f"Detalhes: {error}\n\nTente novamente ou digite \"ajuda\" para ver o que posso fazer."
            )
        return ERROR_PREFIX + "Tente reformular sua solicitação ou digite \"ajuda\" para ver exemplos."

    def failure_text(self, message: str) -> str:
        """Error template around an already user-facing failure message."""
        return ERROR_PREFIX + f"{message}\n\nTente novamente ou digite \"ajuda\" para ver o que posso fazer."

    def empty_input_text(self) -> str:
        return EMPTY_INPUT_TEXT

    def input_too_long_text(self) -> str:
        return INPUT_TOO_LONG_TEXT

    def apology_text(self) -> str:
        return APOLOGY_TEXT

    # -----------------------------------------------------------------------
    # RESULT RENDERING
    # -----------------------------------------------------------------------

    def render(self, result: CommandResult, intent_type: Optional[IntentType] = None) -> str:
        """
        Final text for a command result.

        Help intents always get the help text. Successes and user errors are
        already worded for the user. Store and internal failures are wrapped
        in the error template; the raw diagnostic stays out of the text.
        """
        if intent_type == IntentType.HELP:
            return self.help_text()
        if result.success or result.error_kind == ErrorKind.USER_ERROR:
            return result.message
        return self.failure_text(result.message)

    # -----------------------------------------------------------------------
    # RECORD BODIES
    # -----------------------------------------------------------------------

    def task_line(self, index: int, task: Task) -> str:
        status = task.status.value if task.status else "sem status"
        priority = task.priority.value if task.priority else "sem prioridade"
        return f"{index}. {task.title} ({status}) - {priority}"

    def task_list_text(self, total: int, tasks: List[Task]) -> str:
        lines = "\n".join(self.task_line(i, task) for i, task in enumerate(tasks, start=1))
        return f"📋 Encontrei {total} tarefa(s):\n\n{lines}"

    def note_line(self, index: int, note: Note) -> str:
        tags = f" [{', '.join(note.tags)}]" if note.tags else ""
        return f"{index}. {note.title}{tags}"

    def note_list_text(self, total: int, notes: List[Note]) -> str:
        lines = "\n".join(self.note_line(i, note) for i, note in enumerate(notes, start=1))
        return f"📚 Encontrei {total} nota(s):\n\n{lines}"

    def dashboard_text(self, summary: DashboardSummary) -> str:
        return (
            "📊 **Dashboard - Resumo**\n\n"
            "📋 **Tarefas:**\n"
            f"• A fazer: {summary.pending_tasks}\n"
            f"• Em progresso: {summary.in_progress_tasks}\n"
            f"• Concluídas: {summary.completed_tasks}\n"
            f"• Atrasadas: {summary.overdue_tasks}\n"
            f"• Para hoje: {summary.today_tasks}\n\n"
            f"📝 **Notas:** {summary.total_notes}\n"
            f"🚀 **Projetos ativos:** {summary.active_projects}\n\n"
            f"⚡ **Produtividade hoje:** {summary.completed_today} tarefas concluídas"
        )

    def analytics_text(self, stats: ProductivityStats) -> str:
        label = PERIOD_LABELS.get(stats.period, stats.period)
        average = f"{stats.average_tasks_per_day:.1f}".replace(".", ",")
        return (
            f"📈 **Estatísticas ({label})**\n\n"
            f"✅ **Tarefas concluídas:** {stats.tasks_completed}\n"
            f"🆕 **Tarefas criadas:** {stats.tasks_created}\n"
            f"📝 **Notas criadas:** {stats.notes_created}\n"
            f"🚀 **Projetos criados:** {stats.projects_created}\n"
            f"🎯 **Média diária:** {average} tarefas concluídas"
        )
