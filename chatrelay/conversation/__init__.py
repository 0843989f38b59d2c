"""
Conversation logic: window assembly and the three history operations.
"""

from .models import ConversationConfig
from .prompts import DEFAULT_SYSTEM_PROMPT, EMPTY_REPLY_PLACEHOLDER
from .service import ConversationService, build_conversation_window

__all__ = [
    "ConversationConfig",
    "ConversationService",
    "DEFAULT_SYSTEM_PROMPT",
    "EMPTY_REPLY_PLACEHOLDER",
    "build_conversation_window",
]
