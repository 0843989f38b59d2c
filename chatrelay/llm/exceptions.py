"""
Structured exception hierarchy for completion providers.
"""

from typing import Any, Dict, Optional


class LLMProviderError(Exception):
    """
    Base exception for all completion provider errors.

    Attributes:
        message: Human-readable error message
        provider_id: Identifier of the provider that raised the error
        model: Model identifier (if applicable)
        error_type: Categorization of error type
        metadata: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        provider_id: str,
        model: Optional[str] = None,
        error_type: str = "unknown",
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider_id = provider_id
        self.model = model
        self.error_type = error_type
        self.metadata = metadata or {}


class ProviderAPIError(LLMProviderError):
    """
    Non-success HTTP response from a provider.

    Attributes:
        status_code: HTTP status code
        response_body: Raw response body from the API
    """

    def __init__(
        self,
        message: str,
        provider_id: str,
        status_code: int,
        response_body: str,
        model: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            provider_id=provider_id,
            model=model,
            error_type=self._categorize_status_code(status_code),
            metadata={
                "status_code": status_code,
                "response_body": response_body[:1000],
            },
        )
        self.status_code = status_code
        self.response_body = response_body

    @staticmethod
    def _categorize_status_code(status_code: int) -> str:
        if status_code == 400:
            return "invalid_request"
        elif status_code == 401:
            return "authentication_error"
        elif status_code == 403:
            return "permission_denied"
        elif status_code == 404:
            return "not_found"
        elif status_code == 429:
            return "rate_limit_exceeded"
        elif 500 <= status_code < 600:
            return "server_error"
        else:
            return "api_error"


class ProviderConnectionError(LLMProviderError):
    """The provider could not be reached."""

    def __init__(self, message: str, provider_id: str, model: Optional[str] = None):
        super().__init__(
            message=message,
            provider_id=provider_id,
            model=model,
            error_type="connection_error",
        )


class ProviderTimeoutError(LLMProviderError):
    """The provider did not answer within the configured timeout."""

    def __init__(
        self,
        message: str,
        provider_id: str,
        timeout_seconds: int,
        model: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            provider_id=provider_id,
            model=model,
            error_type="timeout",
            metadata={"timeout_seconds": timeout_seconds},
        )
        self.timeout_seconds = timeout_seconds
