from typing import List, Optional, Sequence

from chatrelay.llm import (
    CompletionClient,
    CompletionParams,
    LLMMessage,
    LLMResponse,
)


class ScriptedCompletionClient(CompletionClient):
    """
    Completion client that replays scripted replies and records every
    window it was asked to complete.
    """

    provider_id = "scripted"

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[List[LLMMessage]] = []
        self.params: List[CompletionParams] = []
        self.initialized = False
        self.cleaned_up = False

    async def initialize(self) -> None:
        self.initialized = True

    async def cleanup(self) -> None:
        self.cleaned_up = True

    async def complete(
        self, messages: Sequence[LLMMessage], params: CompletionParams
    ) -> LLMResponse:
        self.calls.append(list(messages))
        self.params.append(params)
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else "ok"
        return LLMResponse(content=content, model="scripted-model", provider="scripted")

    @property
    def last_window(self) -> List[LLMMessage]:
        return self.calls[-1]
