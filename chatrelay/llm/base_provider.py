"""
Base abstraction for completion providers.

Defines the message and response types shared by every provider and the
``CompletionClient`` capability the conversation service depends on, so a
scripted double can stand in for the network in tests.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

import aiohttp

logger = logging.getLogger(__name__)

VALID_ROLES = frozenset({"system", "user", "assistant"})


@dataclass
class LLMMessage:
    """
    Role-tagged message sent to a completion endpoint.

    Attributes:
        role: Message role ('system', 'user', 'assistant')
        content: Message text
    """

    role: str
    content: str

    def __post_init__(self):
        if self.role not in VALID_ROLES:
            raise ValueError(
                f"Invalid role '{self.role}'. Must be one of: {sorted(VALID_ROLES)}"
            )

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class CompletionParams:
    """Generation parameters, fixed by configuration rather than per call."""

    temperature: float = 0.6
    max_output_tokens: int = 400


@dataclass
class LLMResponse:
    """
    Response from a completion provider.

    Attributes:
        content: Generated text (may be empty when the provider returned none)
        model: Model identifier used for generation
        provider: Provider name
        tokens_used: Total tokens consumed
        prompt_tokens: Tokens in the prompt
        completion_tokens: Tokens in the completion
        finish_reason: Why generation stopped ('stop', 'length', ...)
        metadata: Additional provider-specific response data
    """

    content: str
    model: str
    provider: str
    tokens_used: Optional[int] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    finish_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class CompletionClient(ABC):
    """
    Stateless text-completion capability.

    Maps an ordered sequence of role-tagged messages to one generated
    message. Implementations raise ``LLMProviderError`` subclasses on
    failure and never retry.
    """

    provider_id: str = "completion"

    async def initialize(self) -> None:
        """Acquire network resources. Called once at startup."""

    async def cleanup(self) -> None:
        """Release network resources. Called once at shutdown."""

    @abstractmethod
    async def complete(
        self, messages: Sequence[LLMMessage], params: CompletionParams
    ) -> LLMResponse:
        """Generate one message for the given conversation."""


class BaseHTTPProvider:
    """
    Mixin for HTTP-based providers.

    Owns a pooled ``aiohttp.ClientSession`` with a total request timeout.
    """

    def __init__(self):
        self._session: Optional[aiohttp.ClientSession] = None

    def _initialize_session(
        self,
        timeout_seconds: int,
        max_connections: int = 100,
        max_connections_per_host: int = 30,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Initialize HTTP session with connection pooling.

        Args:
            timeout_seconds: Total request timeout
            max_connections: Maximum total connections
            max_connections_per_host: Maximum connections per host
            headers: Optional default headers
        """
        if self._session is not None:
            return

        connector = aiohttp.TCPConnector(
            limit=max_connections,
            limit_per_host=max_connections_per_host,
            ttl_dns_cache=300,
            keepalive_timeout=30,
            enable_cleanup_closed=True,
        )

        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout_seconds, connect=10),
            connector=connector,
            connector_owner=True,
            headers=headers,
        )

    async def _cleanup_session(self) -> None:
        """Close the session and give connections time to close gracefully."""
        if self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0.25)

        self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        """
        Return the active session.

        Raises:
            RuntimeError: If the session has not been initialized
        """
        if self._session is None or self._session.closed:
            raise RuntimeError("HTTP session not initialized. Call initialize() first.")
        return self._session
