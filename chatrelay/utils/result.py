"""
Result type for explicit error handling.

This module provides a Result type that represents either a successful
operation (Success) or a failed operation (Failure). The conversation service
returns Results so that the HTTP layer can map each failure kind to a
status code without catching exceptions.

Example:
    >>> result = Success("hi there")
    >>> result.unwrap()
    'hi there'

    >>> result = invalid_request("uid required")
    >>> result.to_dict()
    {'success': False, 'error': 'uid required', 'error_type': 'InvalidRequest'}
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass
class Success(Generic[T]):
    """
    Represents a successful operation with a value.

    Attributes:
        value: The successful result value
        metadata: Optional metadata about the operation
    """

    value: T
    metadata: Optional[Dict[str, Any]] = None

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with success=True and data field
        """
        result = {"success": True, "data": self.value}
        if self.metadata:
            result["metadata"] = self.metadata
        return result

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@dataclass
class Failure(Generic[E]):
    """
    Represents a failed operation with an error.

    Attributes:
        error: The error message
        error_type: Category of error (e.g., "UpstreamStoreError")
        context: Additional context about the error
        recoverable: Whether the caller could reasonably try again
        status_code: HTTP status code hint for API responses
    """

    error: E
    error_type: str = "UnknownError"
    context: Optional[Dict[str, Any]] = None
    recoverable: bool = False
    status_code: int = 500

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """
        Attempt to get the value.

        Raises:
            RuntimeError: Always, since this is a Failure
        """
        raise RuntimeError(f"Called unwrap on Failure: {self.error}")

    def unwrap_or(self, default: Any) -> Any:
        return default

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with success=False and error fields
        """
        result = {
            "success": False,
            "error": str(self.error),
            "error_type": self.error_type,
        }
        if self.context:
            result["context"] = self.context
        if self.recoverable:
            result["recoverable"] = True
        return result

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Failure({self.error_type}: {self.error})"


Result = Union[Success[T], Failure[E]]


class ErrorType:
    """Failure kinds with their HTTP status codes and recoverability."""

    INVALID_REQUEST = ("InvalidRequest", 400, False)
    UPSTREAM_STORE_ERROR = ("UpstreamStoreError", 500, True)
    UPSTREAM_COMPLETION_ERROR = ("UpstreamCompletionError", 500, True)


def _failure(kind: tuple, message: str, context: Optional[Dict[str, Any]]) -> Failure:
    error_type, status_code, recoverable = kind
    return Failure(
        error=message,
        error_type=error_type,
        context=context,
        recoverable=recoverable,
        status_code=status_code,
    )


def invalid_request(message: str, context: Optional[Dict[str, Any]] = None) -> Failure:
    """Create a failure for malformed or missing client input."""
    return _failure(ErrorType.INVALID_REQUEST, message, context)


def upstream_store_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> Failure:
    """Create a failure for a rejected or unreachable row store."""
    return _failure(ErrorType.UPSTREAM_STORE_ERROR, message, context)


def upstream_completion_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> Failure:
    """Create a failure for a rejected or unreachable completion endpoint."""
    return _failure(ErrorType.UPSTREAM_COMPLETION_ERROR, message, context)
