"""Error types raised by the election services."""

from typing import Any

from campusvote.models import Eligibility


class ElectionError(Exception):
    """Base exception for election operations."""

    # Whether the caller may retry the same operation later
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ElectionError):
    """Raised when submitted data is malformed (ballots, registrations)."""

    def __init__(self, message: str, errors: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


_INELIGIBLE_MESSAGES = {
    Eligibility.ALREADY_VOTED: "You have already participated in this election",
    Eligibility.WINDOW_CLOSED: "The voting period has expired",
    Eligibility.NOT_ELIGIBLE: "This account is not eligible to vote",
}


class IneligibleError(ElectionError):
    """Raised when a user may not vote right now."""

    def __init__(self, reason: Eligibility) -> None:
        super().__init__(_INELIGIBLE_MESSAGES.get(reason, "Not eligible to vote"))
        self.reason = reason


class NotFoundError(ElectionError):
    """Raised when a lookup key does not exist in the store."""


class TransientIOError(ElectionError):
    """Raised when the store or the time service cannot be reached."""

    retryable = True


class AccessDeniedError(ElectionError):
    """Raised when a non-admin requests an admin-only operation."""


class AuthenticationError(ElectionError):
    """Raised when login credentials do not match a stored user."""


class InvalidTransitionError(ElectionError):
    """Raised when the session router is asked for a disallowed view change."""
