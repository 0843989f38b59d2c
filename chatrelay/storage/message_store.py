"""
Row store interface for conversation messages.

The conversation service only needs three operations against persisted
history: append one row, read the most recent rows for an owner, and purge
an owner. Every backend implements exactly those.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

MESSAGE_ROLES = ("system", "user", "assistant")


class MessageStoreError(Exception):
    """Raised when the backing store rejects or cannot serve an operation."""

    def __init__(self, message: str, backend: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.backend = backend


@dataclass(frozen=True)
class MessageRow:
    """
    One persisted message.

    Attributes:
        owner: Opaque client-chosen identifier (``uid`` column)
        role: 'system', 'user' or 'assistant'
        content: Message text
        created_at: Timestamp assigned by the store at insert time
        id: Store-assigned identifier, when the backend has one
    """

    owner: str
    role: str
    content: str
    created_at: datetime
    id: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape of a history row."""
        data: Dict[str, Any] = {
            "uid": self.owner,
            "role": self.role,
            "content": self.content,
            "created_at": self.created_at,
        }
        if self.id is not None:
            data = {"id": self.id, **data}
        return data


def validate_role(role: str) -> None:
    if role not in MESSAGE_ROLES:
        raise ValueError(
            f"Invalid role: {role}. Must be 'user', 'assistant', or 'system'"
        )


class MessageStore(ABC):
    """
    Ordered, append-only collection of message rows keyed by owner.

    Rows for one owner are totally ordered by ``created_at``. Rows are never
    updated; the only deletion is a full purge of one owner.
    """

    backend = "unknown"

    async def initialize(self) -> None:
        """Open connections. Called once at startup."""

    async def cleanup(self) -> None:
        """Close connections. Called once at shutdown."""

    @abstractmethod
    async def insert(self, owner: str, role: str, content: str) -> MessageRow:
        """
        Append one row.

        Raises:
            MessageStoreError: If the write fails
        """

    @abstractmethod
    async def select(self, owner: str, limit: int) -> List[MessageRow]:
        """
        Return the ``limit`` most recent rows for ``owner``, oldest first.

        Raises:
            MessageStoreError: If the query fails
        """

    @abstractmethod
    async def delete_all(self, owner: str) -> None:
        """
        Delete every row for ``owner``. Deleting nothing is not an error.

        Raises:
            MessageStoreError: If the delete fails
        """
