"""
Configuration types for the conversation service.
"""

from dataclasses import dataclass

from ..llm import CompletionParams
from .prompts import DEFAULT_SYSTEM_PROMPT, EMPTY_REPLY_PLACEHOLDER


@dataclass(frozen=True)
class ConversationConfig:
    """
    Everything the conversation service needs to know, fixed at startup.

    Attributes:
        system_prompt: Instruction prepended to every conversation window
        model: Model name, used for logging only (the client owns the choice)
        temperature: Sampling temperature for every completion
        max_output_tokens: Reply length cap for every completion
        context_limit: Prior rows included in the window of a chat turn
        history_limit: Rows returned by a history fetch
        empty_reply_placeholder: Reply used when the model returns no text
    """

    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    model: str = "llama-3.1-8b-instant"
    temperature: float = 0.6
    max_output_tokens: int = 400
    context_limit: int = 60
    history_limit: int = 200
    empty_reply_placeholder: str = EMPTY_REPLY_PLACEHOLDER

    @property
    def params(self) -> CompletionParams:
        return CompletionParams(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
