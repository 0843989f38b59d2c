"""
Message storage backends.
"""

from .database import PostgresMessageStore
from .memory_store import InMemoryMessageStore
from .message_store import (
    MESSAGE_ROLES,
    MessageRow,
    MessageStore,
    MessageStoreError,
)
from .supabase_store import SupabaseMessageStore

__all__ = [
    "MESSAGE_ROLES",
    "InMemoryMessageStore",
    "MessageRow",
    "MessageStore",
    "MessageStoreError",
    "PostgresMessageStore",
    "SupabaseMessageStore",
]
