"""
Request-scoped logging context.

Correlation ids live in a context variable so that every structured event
emitted while serving one HTTP request carries the same id, even across
awaits on the store and the completion endpoint.
"""

import contextvars
import uuid
from typing import Any, Dict, Optional

_correlation_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)
_operation_context: contextvars.ContextVar[Optional[Dict[str, Any]]] = (
    contextvars.ContextVar("operation_context", default=None)
)


def get_correlation_id() -> str:
    """
    Get the current correlation ID, generating one if none exists.

    Returns:
        Correlation ID string for tracking a request across components
    """
    correlation_id = _correlation_id.get()
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
        _correlation_id.set(correlation_id)
    return correlation_id


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id.set(correlation_id)


def set_operation_context(**context: Any) -> None:
    """Merge key/value pairs into the operation context of the current request."""
    current = get_operation_context()
    current.update(context)
    _operation_context.set(current)


def get_operation_context() -> Dict[str, Any]:
    """
    Get the current operation context dictionary.

    Returns:
        Copy of the operation-scoped context data
    """
    context = _operation_context.get()
    return context.copy() if context is not None else {}
