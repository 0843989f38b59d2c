"""
Chat relay endpoints: history, clear and chat turns.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ..dependencies import get_service_container
from ..error_formatting import error_response, failure_response

router = APIRouter(prefix="/api", tags=["chat"])


def serialize_for_json(obj: Any) -> Any:
    """
    Recursively convert objects to JSON-serializable types.

    Handles:
    - UUID -> str
    - datetime -> ISO format str
    - dict -> recursively serialize values
    - list -> recursively serialize items
    """
    if isinstance(obj, UUID):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, dict):
        return {k: serialize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [serialize_for_json(item) for item in obj]
    else:
        return obj


# Fields are optional so that missing input reaches the service and gets its
# 400 message instead of a validation error.
class ClearRequest(BaseModel):
    """Request model for clearing a conversation."""

    uid: Optional[str] = Field(None, description="Conversation owner")


class ChatRequest(BaseModel):
    """Request model for a chat turn."""

    text: Optional[str] = Field(None, description="User message text")
    uid: Optional[str] = Field(None, description="Conversation owner")


def _conversation_service():
    container = get_service_container()
    if not container or not container.conversation_service:
        return None
    return container.conversation_service


@router.get("/history")
async def get_history(uid: Optional[str] = Query(None)):
    """
    Get the most recent messages for a uid, oldest first.
    """
    service = _conversation_service()
    if service is None:
        return error_response("Conversation service not available", 503)

    result = await service.fetch_history(owner=uid)

    if result.is_failure():
        return failure_response(result)

    rows = result.unwrap()
    return {"messages": [serialize_for_json(row.to_dict()) for row in rows]}


@router.post("/clear")
async def clear_history(request: Optional[ClearRequest] = None):
    """Delete every message stored for a uid."""
    service = _conversation_service()
    if service is None:
        return error_response("Conversation service not available", 503)

    uid = request.uid if request else None
    result = await service.clear_history(owner=uid)

    if result.is_failure():
        return failure_response(result)

    return {"ok": True}


@router.post("/chat")
async def chat(request: Optional[ChatRequest] = None):
    """
    Run one chat turn.

    The user message is stored before the model is called, so it stays in
    history even when the completion fails.
    """
    service = _conversation_service()
    if service is None:
        return error_response("Conversation service not available", 503)

    text = request.text if request else None
    uid = request.uid if request else None
    result = await service.chat(owner=uid, text=text)

    if result.is_failure():
        return failure_response(result)

    return {"reply": result.unwrap()}
