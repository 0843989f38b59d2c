"""
Structured logging utilities for event-based logging.

Provides structured event logging and a human-readable development
formatter that renders the relay's events (store calls, completion calls,
chat turns) as compact one-line summaries.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional


class StructuredLogger:
    """
    Structured logger that creates consistent, searchable log events.

    Every event carries the event name, the correlation id of the current
    request and any operation context set for it.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def event(
        self,
        event_name: str,
        data: Optional[Dict[str, Any]] = None,
        level: int = logging.INFO,
    ):
        """
        Log a structured event with optional data.

        Args:
            event_name: Name of the event (e.g., 'chat_turn_completed')
            data: Dictionary of structured data to include
            level: Log level (defaults to INFO)
        """
        if not self.logger.isEnabledFor(level):
            return

        from .context import get_correlation_id, get_operation_context

        structured_data = {
            "event": event_name,
            "correlation_id": get_correlation_id(),
        }

        operation_context = get_operation_context()
        if operation_context:
            structured_data.update(operation_context)

        if data:
            structured_data.update(data)

        record = self.logger.makeRecord(
            self.logger.name, level, "(structured)", 0, event_name, (), None
        )
        record.structured_data = structured_data

        self.logger.handle(record)


_global_logger: Optional[StructuredLogger] = None


def get_structured_logger(name: str = "chatrelay") -> StructuredLogger:
    """Get or create the structured logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = StructuredLogger(name)
    return _global_logger


def log_event(
    event_name: str, data: Optional[Dict[str, Any]] = None, level: int = logging.INFO
):
    """
    Convenience function for logging structured events.

    Example::

        log_event("message_inserted", {
            "owner": "u1",
            "role": "assistant",
        })
    """
    structured_logger = get_structured_logger()
    structured_logger.event(event_name, data, level)


def create_development_formatter() -> logging.Formatter:
    """
    Create a human-readable formatter for development environments.

    Non-structured records fall back to ``time | level | message``.
    """

    class DevelopmentFormatter(logging.Formatter):
        def format(self, record: logging.LogRecord) -> str:
            timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[
                :-3
            ]

            data: Optional[dict] = getattr(record, "structured_data", None)

            if not data:
                return f"{timestamp} | {record.levelname:5} | {record.getMessage()}"

            event = data.get("event", "")
            operation = data.get("operation", "")

            if event == "operation_started":
                message_content = f"🚀 {operation or 'operation'} started"
            elif event == "operation_completed":
                message_content = self._format_operation_success(data, operation)
            elif event == "operation_failed":
                message_content = self._format_operation_error(data, operation)
            elif event == "service_ready":
                service = data.get("service", "unknown")
                return f"{timestamp} | {record.levelname:5} | ✅ {service} ready"
            else:
                message_content = self._format_generic_event(data, event)

            request_id = str(data.get("correlation_id", ""))[:8]
            return f"{timestamp} | {record.levelname:5} | [{request_id}] {message_content}"

        def _format_duration(self, duration_ms: int) -> str:
            if duration_ms >= 1000:
                return f"{duration_ms/1000:.1f}s"
            return f"{duration_ms}ms"

        def _format_operation_success(self, data: dict, operation: str) -> str:
            duration_ms = data.get("duration_ms", 0)

            if duration_ms < 50:
                duration_emoji = "⚡"
            elif duration_ms > 2000:
                duration_emoji = "🐌"
            else:
                duration_emoji = "⏱️"

            base_message = (
                f"{duration_emoji} {self._format_duration(duration_ms)} {operation}"
            )
            if "result_length" in data:
                return f"{base_message} ({data['result_length']} items)"
            return base_message

        def _format_operation_error(self, data: dict, operation: str) -> str:
            duration_ms = data.get("duration_ms", 0)
            error_type = data.get("error_type", "Error")
            error_message = data.get("error_message", "")

            duration_part = f" {self._format_duration(duration_ms)}" if duration_ms else ""

            if len(error_message) > 60:
                error_message = error_message[:57] + "..."

            return (
                f"❌{duration_part} {operation} failed ({error_type}: {error_message})"
            )

        def _format_generic_event(self, data: dict, event: str) -> str:
            if event == "chat_turn_completed":
                return (
                    f"💬 chat turn for {data.get('owner', '?')} "
                    f"(window={data.get('window_size', 0)}, "
                    f"reply={data.get('reply_length', 0)} chars)"
                )
            if event == "completion_request_failed":
                return f"🛑 completion HTTP {data.get('status', '?')}"
            if event == "history_cleared":
                return f"🧹 history cleared for {data.get('owner', '?')}"
            if event.endswith("_failed") or event.endswith("_error"):
                return f"⚠️ {event}: {data.get('error', '')}"
            return f"📝 {event}"

    return DevelopmentFormatter()
