"""
Supabase-backed message store.

Talks to the project's PostgREST endpoint (``/rest/v1/messages``) with the
anon key, against the same ``messages`` table layout as the PostgreSQL
store.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from dateutil.parser import isoparse

from ..utils.logging import log_event, track
from .message_store import MessageRow, MessageStore, MessageStoreError, validate_role

ROW_COLUMNS = "id,uid,role,content,created_at"


def _row_from_json(data: Dict[str, Any]) -> MessageRow:
    created_at = data["created_at"]
    if isinstance(created_at, str):
        created_at = isoparse(created_at)
    return MessageRow(
        owner=data["uid"],
        role=data["role"],
        content=data["content"],
        created_at=created_at,
        id=data.get("id"),
    )


class SupabaseMessageStore(MessageStore):
    """Message store reached through Supabase's REST interface."""

    backend = "supabase"

    def __init__(
        self,
        url: str,
        anon_key: str,
        table: str = "messages",
        timeout_seconds: int = 30,
    ):
        if not url or not anon_key:
            raise ValueError("Supabase URL and anon key are required")

        self.base_url = f"{url.rstrip('/')}/rest/v1/{table}"
        self.anon_key = anon_key
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        if self._session is not None:
            return

        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            headers={
                "apikey": self.anon_key,
                "Authorization": f"Bearer {self.anon_key}",
                "Content-Type": "application/json",
            },
        )
        log_event("service_ready", {"service": "supabase message store"})

    async def cleanup(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            raise MessageStoreError(
                "Supabase session not initialized. Call initialize() first.",
                backend=self.backend,
            )
        return self._session

    async def _request(
        self,
        method: str,
        params: Dict[str, str],
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Issue one PostgREST call and decode the JSON body (None when empty).

        Raises:
            MessageStoreError: On transport failure or a non-2xx status
        """
        session = self._ensure_session()

        try:
            async with session.request(
                method, self.base_url, params=params, json=payload, headers=headers
            ) as response:
                body = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log_event(
                "message_store_error",
                {"operation": method, "error": str(e)},
                level=logging.ERROR,
            )
            raise MessageStoreError(
                f"Failed to reach Supabase: {e}", backend=self.backend
            ) from e

        if status >= 300:
            message = _extract_error_message(body) or f"Supabase error {status}"
            log_event(
                "message_store_error",
                {"operation": method, "status": status, "error": message},
                level=logging.ERROR,
            )
            raise MessageStoreError(message, backend=self.backend)

        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError as e:
            raise MessageStoreError(
                f"Supabase returned invalid JSON: {body[:200]}", backend=self.backend
            ) from e

    @track(
        operation="store_insert",
        include_args=["owner", "role"],
        track_performance=True,
        frequency="high_frequency",
    )
    async def insert(self, owner: str, role: str, content: str) -> MessageRow:
        validate_role(role)
        data = await self._request(
            "POST",
            params={"select": ROW_COLUMNS},
            payload={"uid": owner, "role": role, "content": content},
            headers={"Prefer": "return=representation"},
        )
        if not data:
            raise MessageStoreError("Failed to insert message", backend=self.backend)
        return _row_from_json(data[0])

    @track(
        operation="store_select",
        include_args=["owner", "limit"],
        track_performance=True,
        frequency="high_frequency",
    )
    async def select(self, owner: str, limit: int) -> List[MessageRow]:
        if limit <= 0:
            return []

        data = await self._request(
            "GET",
            params={
                "select": ROW_COLUMNS,
                "uid": f"eq.{owner}",
                "order": "created_at.desc,id.desc",
                "limit": str(limit),
            },
        )
        rows = [_row_from_json(item) for item in data or []]
        rows.reverse()
        return rows

    @track(
        operation="store_delete",
        include_args=["owner"],
        track_performance=True,
        frequency="low_frequency",
    )
    async def delete_all(self, owner: str) -> None:
        await self._request("DELETE", params={"uid": f"eq.{owner}"})


def _extract_error_message(body: str) -> Optional[str]:
    """PostgREST errors are JSON objects with a ``message`` field."""
    if not body:
        return None
    try:
        data = json.loads(body)
    except ValueError:
        return body[:500]
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return body[:500]
