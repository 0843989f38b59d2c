"""
Process-local message store for development and tests.
"""

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from .message_store import MessageRow, MessageStore, validate_role


class InMemoryMessageStore(MessageStore):
    """
    Keeps rows in a dict of per-owner lists.

    Timestamps are strictly increasing across the whole store, so rows
    inserted back to back never tie on ``created_at``. Nothing survives a
    restart.
    """

    backend = "memory"

    def __init__(self):
        self._rows: Dict[str, List[MessageRow]] = defaultdict(list)
        self._next_id = 1
        self._last_created_at: Optional[datetime] = None

    def _next_timestamp(self) -> datetime:
        now = datetime.now(timezone.utc)
        if self._last_created_at is not None and now <= self._last_created_at:
            now = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = now
        return now

    async def insert(self, owner: str, role: str, content: str) -> MessageRow:
        validate_role(role)
        row = MessageRow(
            owner=owner,
            role=role,
            content=content,
            created_at=self._next_timestamp(),
            id=self._next_id,
        )
        self._next_id += 1
        self._rows[owner].append(row)
        return row

    async def select(self, owner: str, limit: int) -> List[MessageRow]:
        if limit <= 0:
            return []
        return list(self._rows.get(owner, [])[-limit:])

    async def delete_all(self, owner: str) -> None:
        self._rows.pop(owner, None)

    def count(self, owner: str) -> int:
        """Number of rows currently held for ``owner``."""
        return len(self._rows.get(owner, []))
