"""
Assistant Router - HTTP surface for the assistant.

Handles transport only. All request semantics (validation messages,
failure framing, session history) live in AssistantService, so
POST /assistant answers 200 with displayable text even when the request
itself failed; `success` and `error_kind` tell clients what happened.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from alfred.deps import get_assistant_service
from alfred.services.assistant_service import AssistantService


# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------
logger = logging.getLogger("alfred.routers.assistant")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/assistant", tags=["assistant"])


# ---------------------------------------------------------------------------
# REQUEST/RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class AssistantRequest(BaseModel):
    """
    Request schema for POST /assistant.

    Length is not constrained here; the assistant answers empty and
    oversized input with its own messages.

    Example:
    {
        "text": "criar tarefa revisar relatório até amanhã",
        "session_id": "user-42"
    }
    """
    text: str = Field(description="Natural language request")
    session_id: Optional[str] = Field(
        default=None,
        description="Conversation session; defaults to a shared session"
    )


class AssistantResponse(BaseModel):
    """Response schema for POST /assistant."""
    text: str = Field(description="Text to display to the user")
    session_id: str
    request_id: str
    success: bool
    intent: Optional[str] = Field(default=None, description="Classifier label")
    confidence: float = Field(default=0.0, description="Confidence score 0-1")
    action: Optional[str] = Field(default=None, description="Executed action")
    error_kind: Optional[str] = Field(default=None, description="Failure category")
    data: Optional[Any] = Field(default=None, description="Created or queried records")
    processing_time_ms: Optional[float] = None


class TextResponse(BaseModel):
    text: str


class SessionClearedResponse(BaseModel):
    session_id: str
    cleared: bool


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post("", response_model=AssistantResponse)
async def process_request(
    request: AssistantRequest,
    service: AssistantService = Depends(get_assistant_service),
):
    """
    Process a natural language request.

    **Examples:**
    - "criar tarefa revisar relatório até amanhã"
    - "listar tarefas pendentes"
    - "buscar notas sobre python"
    - "como está minha produtividade esta semana?"
    """
    reply = await service.process(request.text, session_id=request.session_id)
    return AssistantResponse(**reply.to_dict())


@router.get("/welcome", response_model=TextResponse)
async def get_welcome(service: AssistantService = Depends(get_assistant_service)):
    """Greeting shown when a client starts a conversation."""
    return TextResponse(text=service.welcome())


@router.get("/help", response_model=TextResponse)
async def get_help(service: AssistantService = Depends(get_assistant_service)):
    return TextResponse(text=service.help())


@router.delete("/sessions/{session_id}", response_model=SessionClearedResponse)
async def clear_session(
    session_id: str,
    service: AssistantService = Depends(get_assistant_service),
):
    """
    Forget a session's history and current task/project.

    Raises:
        404 Not Found: If the session does not exist
    """
    if not service.clear_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found",
        )
    logger.info(f"Session cleared: {session_id}")
    return SessionClearedResponse(session_id=session_id, cleared=True)


@router.get("/stats")
async def get_stats(service: AssistantService = Depends(get_assistant_service)) -> Dict[str, Any]:
    """
    Get usage statistics.

    Returns active sessions, total recorded interactions and, when
    available, aggregated classifier metrics (requests, tokens, latency).
    """
    return service.get_stats()
