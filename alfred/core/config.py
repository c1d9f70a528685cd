"""
Configuration module - centralized settings for the assistant.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To point the assistant at a Notion workspace:
        export NOTION_TOKEN=secret_xxx
        export NOTION_TASKS_DB_ID=...
        export OPENAI_API_KEY=sk-...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    APP_NAME: str = "Alfred Knowledge Assistant"
    DEBUG: bool = False

    # LOG_LEVEL: level for the "alfred" logger tree (DEBUG, INFO, WARNING...)
    LOG_LEVEL: str = "INFO"

    # ---------------------------------------------------------------------------
    # CLASSIFIER (LANGUAGE UNDERSTANDING) SETTINGS
    # ---------------------------------------------------------------------------
    # CLASSIFIER_PROVIDER: which LLM backs the intent classifier
    # - "openai" (default), "anthropic" or "gemini"
    CLASSIFIER_PROVIDER: str = "openai"

    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"

    ANTHROPIC_API_KEY: str = ""
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-latest"

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Timeout (seconds) handed to the provider SDK clients
    AI_REQUEST_TIMEOUT: int = 30

    # Low temperature keeps the JSON classification stable
    CLASSIFIER_TEMPERATURE: float = 0.3
    CLASSIFIER_MAX_TOKENS: int = 2000

    # How many previous turns are shown to the classifier
    CLASSIFIER_HISTORY_TURNS: int = 3

    # ---------------------------------------------------------------------------
    # KNOWLEDGE BASE (BACKING STORE) SETTINGS
    # ---------------------------------------------------------------------------
    # KNOWLEDGE_BASE_BACKEND: "notion" for the real workspace,
    # "memory" for a process-local store (development, demos)
    KNOWLEDGE_BASE_BACKEND: str = "notion"

    # NOTION_TOKEN: internal integration secret
    # - Every database below must be shared with the integration
    NOTION_TOKEN: str = ""
    NOTION_TASKS_DB_ID: str = ""
    NOTION_NOTES_DB_ID: str = ""
    NOTION_PROJECTS_DB_ID: str = ""
    NOTION_API_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT: float = 30.0

    # ---------------------------------------------------------------------------
    # CONVERSATION LIMITS
    # ---------------------------------------------------------------------------
    MAX_INPUT_LENGTH: int = 1000
    MAX_CONTEXT_HISTORY: int = 10
    DEFAULT_LIST_LIMIT: int = 10


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from alfred.core.config import settings
settings = Settings()
