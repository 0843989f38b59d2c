"""
Service container for dependency wiring and lifecycle management.

Builds the message store, the completion client and the conversation
service from settings, initializes them in dependency order and cleans
them up in reverse order on shutdown.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.settings import Settings
from ..conversation import ConversationConfig, ConversationService
from ..llm import CompletionClient, GroqConfig, GroqProvider
from ..storage import (
    InMemoryMessageStore,
    MessageStore,
    PostgresMessageStore,
    SupabaseMessageStore,
)
from ..utils.logging import log_event


class ServiceInitializationError(Exception):
    """Raised when service initialization fails."""


@dataclass
class ServiceConfig:
    """
    Configuration for the core services, derived from Settings once at
    startup.
    """

    settings: Settings
    conversation: ConversationConfig

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceConfig":
        return cls(settings=settings, conversation=settings.conversation_config())


def create_message_store(settings: Settings) -> MessageStore:
    """Pick the store backend named by settings."""
    if settings.store_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ServiceInitializationError(
                "SUPABASE_URL and SUPABASE_ANON_KEY are required for the supabase store"
            )
        return SupabaseMessageStore(
            url=settings.supabase_url, anon_key=settings.supabase_anon_key
        )

    if settings.store_backend == "postgres":
        if not settings.database_url:
            raise ServiceInitializationError(
                "DATABASE_URL is required for the postgres store"
            )
        return PostgresMessageStore(
            dsn=settings.database_url, auto_migrate=settings.database_auto_migrate
        )

    return InMemoryMessageStore()


def create_completion_client(settings: Settings) -> CompletionClient:
    if not settings.groq_api_key:
        raise ServiceInitializationError("GROQ_API_KEY is required")
    return GroqProvider(
        GroqConfig(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            base_url=settings.groq_base_url,
            timeout_seconds=settings.completion_timeout_seconds,
        )
    )


class ServiceContainer:
    """
    Container for the relay's services.

    Usage:
        container = ServiceContainer(ServiceConfig.from_settings(settings))
        await container.initialize()
        result = await container.conversation_service.chat(owner="u1", text="hi")
        await container.cleanup()

    Collaborators can be passed in directly, which is how tests swap in a
    scripted completion client.
    """

    def __init__(
        self,
        config: ServiceConfig,
        store: Optional[MessageStore] = None,
        completion_client: Optional[CompletionClient] = None,
    ):
        self.config = config
        self._initialized = False

        self.store: Optional[MessageStore] = store
        self.completion_client: Optional[CompletionClient] = completion_client
        self.conversation_service: Optional[ConversationService] = None

    async def initialize(self) -> None:
        """
        Initialize services: store, then completion client, then the
        conversation service that depends on both.

        Raises:
            ServiceInitializationError: If any service fails to initialize
        """
        if self._initialized:
            log_event("service_container_already_initialized", level=logging.WARNING)
            return

        settings = self.config.settings

        try:
            if self.store is None:
                self.store = create_message_store(settings)
            await self.store.initialize()

            if self.completion_client is None:
                self.completion_client = create_completion_client(settings)
            await self.completion_client.initialize()

            self.conversation_service = ConversationService(
                store=self.store,
                completion_client=self.completion_client,
                config=self.config.conversation,
            )
        except ServiceInitializationError:
            await self.cleanup()
            raise
        except Exception as e:
            log_event(
                "service_container_init_failed",
                {"error": str(e), "error_type": type(e).__name__},
                level=logging.ERROR,
            )
            await self.cleanup()
            raise ServiceInitializationError(
                f"Failed to initialize services: {e}"
            ) from e

        self._initialized = True
        log_event(
            "service_container_initialized",
            {
                "store": self.store.backend,
                "model": self.config.conversation.model,
            },
        )

    async def cleanup(self) -> None:
        """Release services in reverse initialization order."""
        self.conversation_service = None

        if self.completion_client is not None:
            try:
                await self.completion_client.cleanup()
            except Exception as e:
                log_event(
                    "completion_client_cleanup_failed",
                    {"error": str(e)},
                    level=logging.WARNING,
                )

        if self.store is not None:
            try:
                await self.store.cleanup()
            except Exception as e:
                log_event(
                    "message_store_cleanup_failed",
                    {"error": str(e)},
                    level=logging.WARNING,
                )

        self._initialized = False

    async def __aenter__(self) -> "ServiceContainer":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.cleanup()
