"""
Completion client layer.

The conversation service depends only on ``CompletionClient``; the Groq
provider is the production implementation.
"""

from .base_provider import (
    CompletionClient,
    CompletionParams,
    LLMMessage,
    LLMResponse,
)
from .exceptions import (
    LLMProviderError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderTimeoutError,
)
from .provider_config import GroqConfig
from .providers import GroqProvider

__all__ = [
    "CompletionClient",
    "CompletionParams",
    "LLMMessage",
    "LLMResponse",
    "LLMProviderError",
    "ProviderAPIError",
    "ProviderConnectionError",
    "ProviderTimeoutError",
    "GroqConfig",
    "GroqProvider",
]
