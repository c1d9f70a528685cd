"""In-memory knowledge-base backend."""

from alfred.environments.memory.client import InMemoryKnowledgeBase

__all__ = ["InMemoryKnowledgeBase"]
