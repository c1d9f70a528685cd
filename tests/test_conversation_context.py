"""
Tests for ConversationContextService.

Each session keeps its own rolling history of (input, output) turns plus
the task/project it last touched. Sessions never see each other's state.
"""

from alfred.environments.schemas import Project, Task
from alfred.services.conversation_context_service import (
    ConversationContext,
    ConversationContextService,
)


class TestConversationContextService:
    """Tests for ConversationContextService."""

    def test_get_or_create_returns_same_context(self):
        service = ConversationContextService()

        first = service.get_or_create("session-1")
        second = service.get_or_create("session-1")

        assert first is second
        assert first.history == []
        assert first.current_task is None

    def test_get_does_not_create(self):
        service = ConversationContextService()

        assert service.get("unknown") is None
        assert service.get_stats()["active_sessions"] == 0

    def test_append_records_turn(self):
        service = ConversationContextService()

        service.append("session-1", "listar tarefas", "Nenhuma tarefa encontrada com os filtros especificados.")

        context = service.get("session-1")
        assert len(context.history) == 1
        assert context.history[0].input == "listar tarefas"
        assert context.history[0].output.startswith("Nenhuma tarefa")

    def test_history_is_bounded(self):
        """Older turns are evicted first once max_history is reached."""
        service = ConversationContextService(max_history=3)

        for i in range(5):
            service.append("session-1", f"input {i}", f"output {i}")

        history = service.get("session-1").history
        assert len(history) == 3
        assert [turn.input for turn in history] == ["input 2", "input 3", "input 4"]

    def test_sessions_are_isolated(self):
        service = ConversationContextService()

        service.append("alice", "criar nota", "📝 Nota \"x\" criada com sucesso!")
        service.set_current_task("alice", Task(id="t1", title="Revisar relatório"))

        bob = service.get_or_create("bob")
        assert bob.history == []
        assert bob.current_task is None

    def test_current_task_and_project(self):
        service = ConversationContextService()
        task = Task(id="t1", title="Revisar relatório")
        project = Project(id="p1", name="Website")

        service.set_current_task("s", task)
        service.set_current_project("s", project)

        context = service.get("s")
        assert context.current_task is task
        assert context.current_project is project
        assert context.to_dict()["current_task"] == "Revisar relatório"
        assert context.to_dict()["current_project"] == "Website"

    def test_clear_removes_session(self):
        service = ConversationContextService()
        service.append("s", "a", "b")

        assert service.clear("s") is True
        assert service.get("s") is None

    def test_clear_unknown_session_is_noop(self):
        service = ConversationContextService()

        assert service.clear("never-seen") is False

    def test_clear_all(self):
        service = ConversationContextService()
        service.append("a", "x", "y")
        service.append("b", "x", "y")

        service.clear_all()

        assert service.get_stats() == {"active_sessions": 0, "total_interactions": 0}

    def test_stats_count_sessions_and_turns(self):
        service = ConversationContextService()
        service.append("a", "1", "1")
        service.append("a", "2", "2")
        service.append("b", "3", "3")

        assert service.get_stats() == {"active_sessions": 2, "total_interactions": 3}


class TestConversationContext:
    """Tests for the ConversationContext dataclass."""

    def test_to_dict_serializes_history(self):
        service = ConversationContextService()
        context = service.append("s", "oi", "Olá!")

        data = context.to_dict()

        assert data["session_id"] == "s"
        assert data["history"][0]["input"] == "oi"
        assert data["history"][0]["output"] == "Olá!"
        assert "timestamp" in data["history"][0]

    def test_new_context_defaults(self):
        context = ConversationContext(session_id="x")

        assert context.history == []
        assert context.current_project is None
        assert context.to_dict()["current_task"] is None
