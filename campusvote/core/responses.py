"""Standardized result envelopes returned by the workflow entry points."""

from typing import Any

from campusvote.core.errors import (
    AccessDeniedError,
    AuthenticationError,
    ElectionError,
    IneligibleError,
    InvalidTransitionError,
    NotFoundError,
    TransientIOError,
    ValidationError,
)


def success_response(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Create a successful result."""
    return {"success": True, "data": data, "message": message}


def error_response(
    message: str,
    reason: str,
    data: Any = None,
    errors: dict[str, Any] | None = None,
    retryable: bool = False,
) -> dict[str, Any]:
    """Create a rejected result carrying an explanatory reason."""
    return {
        "success": False,
        "message": message,
        "reason": reason,
        "data": data,
        "errors": errors,
        "retryable": retryable,
    }


def rejection_from_error(exc: ElectionError) -> dict[str, Any]:
    """Translate a service exception into a rejected result."""
    errors = None
    if isinstance(exc, IneligibleError):
        reason = exc.reason.value
    elif isinstance(exc, ValidationError):
        reason = "validation_error"
        errors = exc.errors or None
    elif isinstance(exc, NotFoundError):
        reason = "not_found"
    elif isinstance(exc, AccessDeniedError):
        reason = "access_denied"
    elif isinstance(exc, AuthenticationError):
        reason = "authentication_failed"
    elif isinstance(exc, InvalidTransitionError):
        reason = "invalid_transition"
    elif isinstance(exc, TransientIOError):
        reason = "transient_io"
    else:
        reason = "error"

    return error_response(
        message=exc.message,
        reason=reason,
        errors=errors,
        retryable=exc.retryable,
    )
