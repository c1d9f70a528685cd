"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- In-memory knowledge base (no Notion access)
- Mock LLM provider returning canned classifier JSON
- A fully wired AssistantService with a fixed "today"
- FastAPI TestClient with the assistant on app.state
"""

import json
from datetime import date
from typing import Any, Dict, Generator, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from alfred.ai.intent.classifier import IntentClassifier
from alfred.ai.intent.extractor import CommandExtractor
from alfred.ai.monitoring import AIMonitor
from alfred.ai.providers.base import AIResponse, ProviderType, TokenUsage
from alfred.environments.memory import InMemoryKnowledgeBase
from alfred.services.assistant_service import AssistantService
from alfred.services.command_dispatcher import CommandDispatcher
from alfred.services.conversation_context_service import ConversationContextService
from alfred.services.response_formatter import ResponseFormatter

FIXED_TODAY = date(2025, 1, 15)


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

def classifier_response(
    intent: str,
    entities: Optional[Dict[str, Any]] = None,
    confidence: float = 0.9,
    response: Optional[str] = None,
) -> AIResponse:
    """Build the AIResponse a provider returns for one classification."""
    payload = {
        "intent": intent,
        "entities": entities or {},
        "confidence": confidence,
        "response": response,
    }
    return AIResponse(
        content=json.dumps(payload, ensure_ascii=False),
        provider=ProviderType.OPENAI,
        model="gpt-4o",
        usage=TokenUsage(prompt_tokens=120, completion_tokens=30),
        latency_ms=42.0,
    )


def failed_response(error: str = "Connection timeout") -> AIResponse:
    return AIResponse(
        content="",
        provider=ProviderType.OPENAI,
        model="gpt-4o",
        success=False,
        error=error,
    )


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_kb() -> InMemoryKnowledgeBase:
    """Fresh in-memory knowledge base for each test."""
    return InMemoryKnowledgeBase()


@pytest.fixture
def mock_provider() -> MagicMock:
    """
    Provider double; set generate_json.return_value (or side_effect) per test.

    Defaults to a plain conversation reply.
    """
    provider = MagicMock()
    provider.provider_type = ProviderType.OPENAI
    provider.model = "gpt-4o"
    provider.generate_json = AsyncMock(
        return_value=classifier_response("conversation", response="Olá! Como posso ajudar?")
    )
    return provider


@pytest.fixture
def monitor() -> AIMonitor:
    return AIMonitor()


@pytest.fixture
def assistant(memory_kb, mock_provider, monitor) -> AssistantService:
    """AssistantService over the in-memory store with today fixed to FIXED_TODAY."""
    formatter = ResponseFormatter()
    return AssistantService(
        contexts=ConversationContextService(max_history=10),
        classifier=IntentClassifier(provider=mock_provider, monitor=monitor),
        extractor=CommandExtractor(today_provider=lambda: FIXED_TODAY),
        dispatcher=CommandDispatcher(memory_kb, formatter),
        formatter=formatter,
        monitor=monitor,
    )


@pytest.fixture
def client(assistant) -> Generator[TestClient, None, None]:
    """
    Test client whose app carries the test assistant.

    The client is not used as a context manager, so the lifespan (which
    would build the configured Notion/OpenAI backends) never runs.
    """
    from alfred.main import app

    app.state.assistant = assistant
    try:
        yield TestClient(app)
    finally:
        del app.state.assistant


@pytest.fixture
def make_response():
    """Factory for successful classifier responses (see classifier_response)."""
    return classifier_response


@pytest.fixture
def make_failure():
    """Factory for failed provider responses."""
    return failed_response
