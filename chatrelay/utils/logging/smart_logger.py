"""
Operation tracking decorator.

One decorator that emits start/completion/failure events with timing,
sampling and argument redaction, so store and completion calls stay free of
logging boilerplate.
"""

import asyncio
import functools
import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union, cast

from .context import get_correlation_id
from .structured import log_event

F = TypeVar("F", bound=Callable[..., Any])


class LogConfig:
    """Global configuration for operation tracking."""

    SAMPLE_RATES = {
        "high_frequency": 0.1,
        "medium_frequency": 0.5,
        "low_frequency": 1.0,
    }

    SENSITIVE_KEYS = {"password", "token", "secret", "key", "api_key", "auth"}
    LARGE_CONTENT_KEYS = {"content", "text", "body", "messages"}
    MAX_ARG_LENGTH = 100

    # Mutating operations are never sampled out
    CRITICAL_OPS = {"insert", "delete", "clear", "chat", "initialize"}


def track(
    operation: Optional[str] = None,
    level: int = logging.INFO,
    frequency: str = "low_frequency",
    include_args: Union[bool, List[str]] = True,
    include_result: bool = True,
    track_performance: bool = True,
    emit_events: bool = True,
):
    """
    Decorator that logs an operation's lifecycle.

    Args:
        operation: Operation name (derived from the function if None)
        level: Log level for this operation
        frequency: Sampling category (high_frequency, medium_frequency, low_frequency)
        include_args: True for all keyword args, a list for specific ones, False for none
        include_result: Whether to log information about the return value
        track_performance: Whether to record duration
        emit_events: Set to False to only log failures

    Examples:
        @track()
        @track(operation="store_select", include_args=["owner", "limit"])
    """

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError(f"@track requires a coroutine function, got {func!r}")

        op_name = operation or _get_operation_name(func)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            if not _should_log(op_name, frequency):
                return await func(*args, **kwargs)

            tracker = OperationTracker(
                operation=op_name,
                level=level,
                include_args=include_args,
                include_result=include_result,
                track_performance=track_performance,
                emit_events=emit_events,
                kwargs=kwargs,
            )

            tracker.on_enter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                tracker.on_exit(e)
                raise
            tracker.set_result(result)
            tracker.on_exit(None)
            return result

        return cast(F, async_wrapper)

    return decorator


class OperationTracker:
    """Handles all logging for one invocation of a tracked operation."""

    def __init__(
        self,
        operation: str,
        level: int,
        include_args: Union[bool, List[str]],
        include_result: bool,
        track_performance: bool,
        emit_events: bool,
        kwargs: dict,
    ):
        self.operation = operation
        self.level = level
        self.include_args = include_args
        self.include_result = include_result
        self.track_performance = track_performance
        self.emit_events = emit_events
        self.kwargs = kwargs

        self.start_time: Optional[float] = None
        self.correlation_id: Optional[str] = None
        self.result: Any = None
        self.metrics: Dict[str, Any] = {}

    def on_enter(self) -> None:
        if self.track_performance:
            self.start_time = time.perf_counter()

        self.correlation_id = get_correlation_id()

        if self.emit_events and self.level <= logging.INFO:
            log_event("operation_started", self._build_start_context(), self.level)

    def on_exit(self, error: Optional[Exception]) -> None:
        if self.track_performance and self.start_time:
            self.metrics["duration_ms"] = int(
                (time.perf_counter() - self.start_time) * 1000
            )

        context = self._build_exit_context(error)

        # Failures are always logged, even in silent mode
        if error is not None:
            log_event("operation_failed", context, logging.ERROR)
        elif self.emit_events:
            log_event("operation_completed", context, self.level)

    def set_result(self, result: Any) -> None:
        self.result = result

    def _build_start_context(self) -> Dict[str, Any]:
        context = {
            "operation": self.operation,
            "correlation_id": self.correlation_id,
        }
        if self.include_args:
            context.update(_extract_safe_args(self.kwargs, self.include_args))
        return context

    def _build_exit_context(self, error: Optional[Exception]) -> Dict[str, Any]:
        context = {
            "operation": self.operation,
            "correlation_id": self.correlation_id,
            "success": error is None,
            **self.metrics,
        }

        if self.include_result and error is None and self.result is not None:
            context.update(_extract_result_info(self.result))

        if error is not None:
            context.update(
                {
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                }
            )

        return context


def _get_operation_name(func: Callable) -> str:
    if hasattr(func, "__qualname__"):
        return func.__qualname__.replace(".", "_").lower()
    return func.__name__.lower()


def _should_log(operation: str, frequency: str) -> bool:
    """Decide whether this invocation is logged, based on sampling."""
    if any(critical in operation.lower() for critical in LogConfig.CRITICAL_OPS):
        return True

    sample_rate = LogConfig.SAMPLE_RATES.get(frequency, 1.0)
    return random.random() < sample_rate


def _extract_safe_args(
    kwargs: dict, include: Union[bool, List[str]]
) -> Dict[str, Any]:
    """Extract loggable keyword arguments."""
    if include is True:
        include_keys = set(kwargs.keys())
    elif isinstance(include, list):
        include_keys = set(include)
    else:
        return {}

    return {
        f"arg_{key}": _sanitize_value(key, value)
        for key, value in kwargs.items()
        if key in include_keys
    }


def _sanitize_value(key: str, value: Any) -> Any:
    """Sanitize a single value for logging."""
    if any(sensitive in key.lower() for sensitive in LogConfig.SENSITIVE_KEYS):
        return "[REDACTED]"

    # Message bodies are logged by size only
    if key.lower() in LogConfig.LARGE_CONTENT_KEYS:
        if isinstance(value, str):
            return f"<{len(value)} chars>"
        if isinstance(value, (list, tuple)):
            return f"<{len(value)} items>"

    if isinstance(value, (str, int, float, bool, type(None))):
        if isinstance(value, str) and len(value) > LogConfig.MAX_ARG_LENGTH:
            return f"{value[:LogConfig.MAX_ARG_LENGTH]}..."
        return value
    return f"<{type(value).__name__}>"


def _extract_result_info(result: Any) -> Dict[str, Any]:
    """Extract safe information about the result."""
    result_info: Dict[str, Any] = {"result_type": type(result).__name__}

    if isinstance(result, (list, tuple)):
        result_info["result_length"] = len(result)
    elif isinstance(result, dict):
        result_info["result_keys_count"] = len(result.keys())
    elif isinstance(result, bool):
        result_info["result_value"] = result

    return result_info
