"""Translation of service errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from microblog.services.errors import (
    AuthenticationRequired,
    AuthorizationError,
    MicroblogError,
    NotFoundError,
    StorageError,
    UsernameTakenError,
    ValidationError,
)

LOGIN_URL = "/api/v1/auth/callback"
USERNAME_URL = "/api/v1/username"

GENERIC_FAILURE = {"reason": "internal_error", "message": "Something went wrong"}


def error_detail(exc: MicroblogError) -> dict[str, str]:
    """Return the response body detail for a service error."""
    if isinstance(exc, StorageError):
        return dict(GENERIC_FAILURE)
    detail = {"reason": exc.reason, "message": exc.message}
    if isinstance(exc, AuthenticationRequired):
        detail["login_url"] = LOGIN_URL
    elif exc.reason == "username_required":
        detail["username_url"] = USERNAME_URL
    return detail


def status_for(exc: MicroblogError) -> int:
    """Return the HTTP status code matching a service error class."""
    if isinstance(exc, UsernameTakenError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, AuthenticationRequired):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: MicroblogError) -> HTTPException:
    """Build the HTTPException a route should raise for ``exc``."""
    headers = None
    if isinstance(exc, AuthenticationRequired):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=status_for(exc), detail=error_detail(exc), headers=headers)
