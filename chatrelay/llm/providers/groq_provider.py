"""
Groq provider implementation.

Calls Groq's OpenAI-compatible chat completions endpoint.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Sequence

import aiohttp

from ...utils.logging import log_event, track
from ..base_provider import (
    BaseHTTPProvider,
    CompletionClient,
    CompletionParams,
    LLMMessage,
    LLMResponse,
)
from ..exceptions import (
    LLMProviderError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderTimeoutError,
)
from ..provider_config import GroqConfig

logger = logging.getLogger(__name__)


class GroqProvider(BaseHTTPProvider, CompletionClient):
    """Completion client backed by Groq."""

    def __init__(self, config: GroqConfig, provider_id: str = "groq"):
        BaseHTTPProvider.__init__(self)
        self.config = config
        self.provider_id = provider_id

    async def initialize(self) -> None:
        """Open the HTTP session with the bearer key as a default header."""
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        self._initialize_session(
            timeout_seconds=self.config.timeout_seconds,
            headers=headers,
        )

        log_event(
            "service_ready",
            {"service": "groq", "base_url": self.config.base_url},
        )

    async def cleanup(self) -> None:
        await self._cleanup_session()

    def _convert_messages(self, messages: Sequence[LLMMessage]) -> List[Dict]:
        return [msg.to_dict() for msg in messages]

    def _build_payload(
        self, messages: Sequence[LLMMessage], params: CompletionParams
    ) -> Dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": self._convert_messages(messages),
            "temperature": params.temperature,
            "max_tokens": params.max_output_tokens,
        }

    @staticmethod
    def _extract_content(data: Dict[str, Any]) -> str:
        """Pull ``choices[0].message.content`` out of a response, or ''."""
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        if not isinstance(content, str):
            return ""
        return content.strip()

    @track(
        operation="groq_complete",
        include_args=False,
        track_performance=True,
        frequency="low_frequency",
    )
    async def complete(
        self, messages: Sequence[LLMMessage], params: CompletionParams
    ) -> LLMResponse:
        """
        Generate one reply using Groq.

        Raises:
            ProviderAPIError: Non-2xx response; message carries status and body
            ProviderConnectionError: Transport failure
            ProviderTimeoutError: No answer within the configured timeout
            LLMProviderError: A 2xx response whose body is not JSON
        """
        session = self._ensure_session()
        url = f"{self.config.base_url}/chat/completions"
        payload = self._build_payload(messages, params)

        try:
            async with session.post(url, json=payload) as response:
                response_text = await response.text()

                if not 200 <= response.status < 300:
                    log_event(
                        "completion_request_failed",
                        {
                            "status": response.status,
                            "error": response_text[:500],
                            "model": self.config.model,
                        },
                        level=logging.ERROR,
                    )
                    raise ProviderAPIError(
                        f"Groq error {response.status}: {response_text}",
                        provider_id=self.provider_id,
                        status_code=response.status,
                        response_body=response_text,
                        model=self.config.model,
                    )

        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"Groq did not respond within {self.config.timeout_seconds}s",
                provider_id=self.provider_id,
                timeout_seconds=self.config.timeout_seconds,
                model=self.config.model,
            ) from e
        except aiohttp.ClientError as e:
            log_event(
                "completion_connection_error",
                {"error": str(e), "url": url},
                level=logging.ERROR,
            )
            raise ProviderConnectionError(
                f"Failed to connect to Groq: {e}",
                provider_id=self.provider_id,
                model=self.config.model,
            ) from e

        try:
            data = json.loads(response_text)
        except ValueError as e:
            raise LLMProviderError(
                f"Groq returned invalid JSON: {response_text[:200]}",
                provider_id=self.provider_id,
                model=self.config.model,
                error_type="invalid_response",
            ) from e

        if not isinstance(data, dict):
            data = {}

        usage = data.get("usage") or {}
        finish_reason = None
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            finish_reason = choices[0].get("finish_reason")

        return LLMResponse(
            content=self._extract_content(data),
            model=self.config.model,
            provider="groq",
            tokens_used=usage.get("total_tokens"),
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            finish_reason=finish_reason,
            metadata={"groq_id": data.get("id")},
        )
