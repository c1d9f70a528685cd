"""
Dependencies module - reusable FastAPI dependencies for route handlers.

The assistant core is built once in the application lifespan and kept on
app.state; routes receive it through get_assistant_service.
"""

from fastapi import HTTPException, Request, status

from alfred.services.assistant_service import AssistantService


def get_assistant_service(request: Request) -> AssistantService:
    """
    Return the process-wide AssistantService.

    Raises:
        503 Service Unavailable: If the lifespan has not built the service
    """
    service = getattr(request.app.state, "assistant", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Assistant is not initialized",
        )
    return service
