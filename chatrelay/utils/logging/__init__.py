"""
Logging infrastructure for the chat relay.

Structured events, request correlation ids and a single ``@track``
decorator for operation timing.
"""

from .context import get_correlation_id, set_correlation_id, set_operation_context
from .smart_logger import track
from .structured import StructuredLogger, create_development_formatter, log_event

__all__ = [
    "track",
    "log_event",
    "get_correlation_id",
    "set_correlation_id",
    "set_operation_context",
    "StructuredLogger",
    "create_development_formatter",
]
