"""
Conversation Context Service - per-session history for the assistant.

Each session keeps a rolling window of its most recent turns (input and
reply) plus weak references to the task and project it last talked about.
The intent classifier reads the last few turns so follow-ups like "marca
essa como concluída" have something to refer to.

State is process-local: nothing is persisted, and a context lives until it
is cleared or the process exits. Sessions never share state.

Example flow:
1. "criar tarefa revisar relatório"  -> turn appended, current_task set
2. "qual a prioridade dela?"         -> classifier sees the previous turn
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger("alfred.conversation")

DEFAULT_MAX_HISTORY = 10


@dataclass
class ConversationTurn:
    """A single turn in the conversation (user input + assistant output)."""
    input: str
    output: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.input,
            "output": self.output,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ConversationContext:
    """
    State for one session.

    current_task / current_project are the most recent records the session
    created or touched. They are snapshots, not owned records; the store
    remains the source of truth.
    """
    session_id: str
    history: List[ConversationTurn] = field(default_factory=list)
    current_task: Optional[Any] = None
    current_project: Optional[Any] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "history": [turn.to_dict() for turn in self.history],
            "current_task": getattr(self.current_task, "title", None),
            "current_project": getattr(self.current_project, "name", None),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class ConversationContextService:
    """
    Service that owns every ConversationContext, keyed by session id.

    Usage:
        contexts = ConversationContextService(max_history=10)

        context = contexts.get_or_create("session-1")
        contexts.append("session-1", "listar tarefas", "📋 Encontrei 2 tarefa(s): ...")
        contexts.clear("session-1")
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        """
        Initialize the service.

        Args:
            max_history: Turns kept per session; older turns are evicted first
        """
        self._contexts: Dict[str, ConversationContext] = {}
        self.max_history = max_history
        logger.info(f"Conversation context service initialized (max history: {max_history})")

    def get_or_create(self, session_id: str) -> ConversationContext:
        """Return the session's context, creating an empty one on first use."""
        context = self._contexts.get(session_id)
        if context is None:
            context = ConversationContext(session_id=session_id)
            self._contexts[session_id] = context
            logger.debug(f"Context created for session {session_id[:8]}")
        return context

    def get(self, session_id: str) -> Optional[ConversationContext]:
        """Return the session's context without creating it."""
        return self._contexts.get(session_id)

    def append(self, session_id: str, input: str, output: str) -> ConversationContext:
        """
        Add one turn to the session's history.

        Args:
            session_id: Session identifier
            input: What the user said
            output: What the assistant answered
        """
        context = self.get_or_create(session_id)
        context.history.append(ConversationTurn(input=input, output=output))
        if len(context.history) > self.max_history:
            context.history = context.history[-self.max_history:]
        context.updated_at = datetime.now(timezone.utc)

        logger.debug(f"Turn added for session {session_id[:8]}, history_len={len(context.history)}")
        return context

    def set_current_task(self, session_id: str, task: Any) -> None:
        context = self.get_or_create(session_id)
        context.current_task = task
        context.updated_at = datetime.now(timezone.utc)

    def set_current_project(self, session_id: str, project: Any) -> None:
        context = self.get_or_create(session_id)
        context.current_project = project
        context.updated_at = datetime.now(timezone.utc)

    def clear(self, session_id: str) -> bool:
        """
        Remove the session's context. Clearing an unknown session is a no-op.

        Returns:
            True if a context was removed
        """
        if session_id in self._contexts:
            del self._contexts[session_id]
            logger.debug(f"Context cleared for session {session_id[:8]}")
            return True
        return False

    def clear_all(self) -> None:
        """Clear all contexts (for testing/reset)."""
        self._contexts.clear()
        logger.info("All conversation contexts cleared")

    def get_stats(self) -> Dict[str, int]:
        return {
            "active_sessions": len(self._contexts),
            "total_interactions": sum(len(c.history) for c in self._contexts.values()),
        }
