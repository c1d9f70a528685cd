"""
Environments Module - backends for the knowledge base the assistant manages.

    notion/  Notion REST API (production)
    memory/  process-local dictionaries (development and tests)

Use create_knowledge_base() to build the backend selected by
KNOWLEDGE_BASE_BACKEND.
"""

from typing import Optional

from alfred.core.config import Settings, settings as default_settings
from alfred.environments.base import (
    APIError,
    ConfigurationError,
    KnowledgeBaseClient,
    KnowledgeBaseError,
    NotFoundError,
    StoreValidationError,
)
from alfred.environments.memory import InMemoryKnowledgeBase
from alfred.environments.notion import NotionKnowledgeBase


def create_knowledge_base(settings: Optional[Settings] = None) -> KnowledgeBaseClient:
    """
    Build the configured knowledge-base backend.

    Raises:
        ConfigurationError: If KNOWLEDGE_BASE_BACKEND names no known backend
    """
    settings = settings or default_settings
    backend = settings.KNOWLEDGE_BASE_BACKEND.lower()

    if backend == NotionKnowledgeBase.backend_name:
        return NotionKnowledgeBase(
            token=settings.NOTION_TOKEN,
            tasks_db_id=settings.NOTION_TASKS_DB_ID,
            notes_db_id=settings.NOTION_NOTES_DB_ID,
            projects_db_id=settings.NOTION_PROJECTS_DB_ID,
            api_version=settings.NOTION_API_VERSION,
            timeout=settings.NOTION_TIMEOUT,
        )
    if backend == InMemoryKnowledgeBase.backend_name:
        return InMemoryKnowledgeBase()

    raise ConfigurationError(f"Unknown knowledge base backend: {settings.KNOWLEDGE_BASE_BACKEND}")


__all__ = [
    "APIError",
    "ConfigurationError",
    "KnowledgeBaseClient",
    "KnowledgeBaseError",
    "NotFoundError",
    "StoreValidationError",
    "InMemoryKnowledgeBase",
    "NotionKnowledgeBase",
    "create_knowledge_base",
]
