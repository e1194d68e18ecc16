"""Domain errors raised by the service layer.

Each error carries a short machine-readable ``reason`` alongside the human
message. The API layer maps the error class to an HTTP status and returns
both fields to the caller; storage errors are the exception and never expose
their message.
"""

from __future__ import annotations


class MicroblogError(Exception):
    """Base class for all service-level failures."""

    reason = "error"

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason


class ValidationError(MicroblogError):
    """The request was well-formed but its values were rejected."""

    reason = "invalid_request"


class UsernameTakenError(ValidationError):
    """The chosen username already belongs to another user."""

    reason = "username_taken"


class AuthenticationRequired(MicroblogError):
    """No verified principal is attached to the request."""

    reason = "login_required"


class AuthorizationError(MicroblogError):
    """The caller is known but may not perform the action."""

    reason = "forbidden"


class NotFoundError(MicroblogError):
    """The target post or user does not exist."""

    reason = "not_found"


class StorageError(MicroblogError):
    """The backing store failed in a way the caller cannot fix."""

    reason = "internal_error"
