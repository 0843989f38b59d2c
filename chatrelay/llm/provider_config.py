"""
Typed configuration for completion providers.
"""

from dataclasses import dataclass


class ProviderDefaults:
    GROQ_BASE_URL = "https://api.groq.com/openai/v1"
    GROQ_MODEL = "llama-3.1-8b-instant"
    GROQ_TIMEOUT = 60


@dataclass(frozen=True)
class GroqConfig:
    """
    Configuration for the Groq provider.

    Attributes:
        api_key: Groq API key (required)
        model: Chat model to request
        base_url: API base URL
        timeout_seconds: Total request timeout in seconds
    """

    api_key: str
    model: str = ProviderDefaults.GROQ_MODEL
    base_url: str = ProviderDefaults.GROQ_BASE_URL
    timeout_seconds: int = ProviderDefaults.GROQ_TIMEOUT

    def __post_init__(self):
        if not self.api_key or not self.api_key.strip():
            raise ValueError("Groq API key is required")
        if self.timeout_seconds <= 0:
            raise ValueError("Timeout must be positive")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
