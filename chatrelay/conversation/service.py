"""
Conversation service: history fetch, history clear and the chat turn.

A chat turn reads recent history, builds the conversation window, persists
the user's message, asks the completion client for a reply and persists
that reply. The steps run strictly in that order with no transaction and
no rollback: a user row written before a failed completion stays written.
"""

import logging
from typing import List, Sequence

from ..llm import CompletionClient, LLMMessage
from ..storage import MessageRow, MessageStore
from ..utils.logging import log_event, track
from ..utils.result import (
    Result,
    Success,
    invalid_request,
    upstream_completion_error,
    upstream_store_error,
)
from .models import ConversationConfig


def build_conversation_window(
    system_prompt: str, history: Sequence[MessageRow], text: str
) -> List[LLMMessage]:
    """
    Assemble the messages sent to the completion client.

    One system entry, then ``history`` in the order given (oldest first),
    then the new user entry.
    """
    window = [LLMMessage(role="system", content=system_prompt)]
    window.extend(LLMMessage(role=row.role, content=row.content) for row in history)
    window.append(LLMMessage(role="user", content=text))
    return window


class ConversationService:
    """
    Sequences reads and writes against the message store and one call to
    the completion client per chat turn.

    Holds no state between calls beyond its collaborators. All methods
    return Result types; nothing is retried.
    """

    def __init__(
        self,
        store: MessageStore,
        completion_client: CompletionClient,
        config: ConversationConfig,
    ):
        self.store = store
        self.completion_client = completion_client
        self.config = config

    @track(
        operation="history_fetch",
        include_args=["owner"],
        track_performance=True,
        frequency="medium_frequency",
    )
    async def fetch_history(self, owner: str) -> Result[List[MessageRow], str]:
        """
        Get the most recent rows for an owner, oldest first.

        Returns:
            Success with up to ``history_limit`` rows, or Failure
        """
        if not owner:
            return invalid_request("uid required")

        try:
            rows = await self.store.select(
                owner=owner, limit=self.config.history_limit
            )
        except Exception as e:
            log_event(
                "history_fetch_failed",
                {"owner": owner, "error": str(e)},
                level=logging.ERROR,
            )
            return upstream_store_error(str(e), context={"owner": owner})

        return Success(rows)

    @track(
        operation="history_clear",
        include_args=["owner"],
        track_performance=True,
        frequency="low_frequency",
    )
    async def clear_history(self, owner: str) -> Result[bool, str]:
        """Delete every row for an owner. Clearing an empty history succeeds."""
        if not owner:
            return invalid_request("uid required")

        try:
            await self.store.delete_all(owner=owner)
        except Exception as e:
            log_event(
                "history_clear_failed",
                {"owner": owner, "error": str(e)},
                level=logging.ERROR,
            )
            return upstream_store_error(str(e), context={"owner": owner})

        log_event("history_cleared", {"owner": owner}, level=logging.WARNING)
        return Success(True)

    @track(
        operation="chat_turn",
        include_args=["owner", "text"],
        track_performance=True,
        frequency="low_frequency",
    )
    async def chat(self, owner: str, text: str) -> Result[str, str]:
        """
        Run one chat turn and return the assistant's reply.

        The window sent to the model reflects history before this turn's
        user row is written.
        """
        if not owner or not text:
            return invalid_request("text and uid required")

        context = {"owner": owner}

        try:
            history = await self.store.select(
                owner=owner, limit=self.config.context_limit
            )
        except Exception as e:
            log_event(
                "chat_context_fetch_failed",
                {"owner": owner, "error": str(e)},
                level=logging.ERROR,
            )
            return upstream_store_error(str(e), context=context)

        window = build_conversation_window(self.config.system_prompt, history, text)

        try:
            await self.store.insert(owner=owner, role="user", content=text)
        except Exception as e:
            log_event(
                "chat_user_insert_failed",
                {"owner": owner, "error": str(e)},
                level=logging.ERROR,
            )
            return upstream_store_error(str(e), context=context)

        try:
            response = await self.completion_client.complete(window, self.config.params)
        except Exception as e:
            log_event(
                "chat_completion_failed",
                {
                    "owner": owner,
                    "model": self.config.model,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                level=logging.ERROR,
            )
            return upstream_completion_error(
                str(e), context={**context, "model": self.config.model}
            )

        reply = (response.content or "").strip() or self.config.empty_reply_placeholder

        try:
            await self.store.insert(owner=owner, role="assistant", content=reply)
        except Exception as e:
            log_event(
                "chat_reply_insert_failed",
                {"owner": owner, "error": str(e)},
                level=logging.ERROR,
            )
            return upstream_store_error(str(e), context=context)

        log_event(
            "chat_turn_completed",
            {
                "owner": owner,
                "window_size": len(window),
                "reply_length": len(reply),
                "tokens_used": response.tokens_used,
            },
        )
        return Success(reply)
