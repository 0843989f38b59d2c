"""
Error response helpers for the API.

Every error leaves the API as ``{"error": "<message>"}``, including request
bodies FastAPI rejects before a route runs (400 instead of 422).
"""

import logging

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...utils.logging import log_event
from ...utils.result import Failure


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


def failure_response(failure: Failure) -> JSONResponse:
    """
    Turn a service Failure into an error response.

    The failure kind is logged; the client sees only the message and the
    status code.
    """
    log_event(
        "request_failed",
        {
            "error_type": failure.error_type,
            "status_code": failure.status_code,
            "error": str(failure.error),
        },
        level=logging.WARNING if failure.status_code < 500 else logging.ERROR,
    )
    return error_response(str(failure.error), failure.status_code)


def describe_validation_error(exc: RequestValidationError) -> str:
    """
    One-line message for a request FastAPI could not parse.

    Uses the first reported problem; the ``body``/``query`` prefix is
    dropped from its location.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"

    location = ".".join(
        str(part) for part in first.get("loc", ()) if part not in ("body", "query")
    )
    message = first.get("msg", "invalid value")
    if location:
        return f"Invalid request: {location}: {message}"
    return f"Invalid request: {message}"


def validation_error_response(exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_error(exc)
    log_event(
        "request_validation_failed",
        {"error": message, "error_count": len(exc.errors())},
        level=logging.WARNING,
    )
    return error_response(message, 400)
