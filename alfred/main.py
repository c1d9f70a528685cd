"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn alfred.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alfred.core.config import settings
from alfred.core.log_config import configure_logging
from alfred.routers import assistant
from alfred.services.assistant_service import build_assistant_service


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------
# The assistant core (provider client, knowledge base HTTP client, session
# store) is built once per process and closed on shutdown.
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = configure_logging(settings.LOG_LEVEL)
    app.state.assistant = build_assistant_service(settings)
    logger.info(f"{settings.APP_NAME} started")
    try:
        yield
    finally:
        await app.state.assistant.aclose()
        logger.info(f"{settings.APP_NAME} stopped")


# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# assistant.router: /assistant requests, welcome/help text, sessions, stats
app.include_router(assistant.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Does NOT check knowledge base or provider connectivity.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
