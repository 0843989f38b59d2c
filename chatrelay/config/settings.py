"""
Application settings and configuration.
"""

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

from ..conversation.prompts import DEFAULT_SYSTEM_PROMPT

if TYPE_CHECKING:
    from ..conversation.models import ConversationConfig

STORE_BACKENDS = ("memory", "postgres", "supabase")


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Assistant
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT, description="System instruction for every turn"
    )
    temperature: float = Field(default=0.6, ge=0, le=2, description="Sampling temperature")
    max_output_tokens: int = Field(
        default=400, ge=1, description="Maximum tokens per reply"
    )
    context_limit: int = Field(
        default=60, ge=0, description="Prior messages sent to the model per turn"
    )
    history_limit: int = Field(
        default=200, ge=1, description="Messages returned by the history endpoint"
    )

    # Completion endpoint (Groq, OpenAI-compatible)
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    groq_model: str = Field(default="llama-3.1-8b-instant", description="Groq model")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1", description="Groq API base URL"
    )
    completion_timeout_seconds: int = Field(
        default=60, ge=1, description="Total timeout for one completion request"
    )

    # Message store
    store_backend: Optional[str] = Field(
        default=None, description="memory, postgres or supabase (derived if unset)"
    )
    database_url: Optional[str] = Field(default=None, description="PostgreSQL DSN")
    database_auto_migrate: bool = Field(
        default=True, description="Create the messages table on startup"
    )
    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_anon_key: Optional[str] = Field(
        default=None, description="Supabase anon key"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=10000, description="Server port")
    log_level: str = Field(default="INFO", description="Log level")
    static_dir: Optional[Path] = Field(
        default=Path("static"), description="Browser client directory"
    )
    # Comma-separated in the environment ("*" or "https://a.org,https://b.org")
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        value = value.strip()
        if value.startswith("["):
            return json.loads(value)
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        if self.store_backend is None:
            if self.supabase_url:
                self.store_backend = "supabase"
            elif self.database_url:
                self.store_backend = "postgres"
            else:
                self.store_backend = "memory"

        self.store_backend = self.store_backend.lower()
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"Invalid store backend '{self.store_backend}'. "
                f"Must be one of: {', '.join(STORE_BACKENDS)}"
            )

    def conversation_config(self) -> "ConversationConfig":
        """Build the immutable configuration handed to the conversation service."""
        from ..conversation.models import ConversationConfig

        return ConversationConfig(
            system_prompt=self.system_prompt,
            model=self.groq_model,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            context_limit=self.context_limit,
            history_limit=self.history_limit,
        )


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging with development-friendly structured output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = getattr(logging, level.upper())

    from ..utils.logging import create_development_formatter

    formatter = create_development_formatter()

    # Configure only our application logger (chatrelay.*)
    app_logger = logging.getLogger("chatrelay")
    app_logger.setLevel(log_level)

    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    # Prevent propagation to root logger to avoid duplication
    app_logger.propagate = False

    # Keep uvicorn's own logs flowing through the root logger
    logging.getLogger().setLevel(log_level)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
