# src/microblog/api/v1/endpoints/auth.py
"""Authentication endpoints for the Microblog API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from microblog.api.v1.dependencies import IdentityResolverDep, OptionalUserDep
from microblog.core.security import create_access_token
from microblog.core.settings import settings
from microblog.models import User
from microblog.schemas.user import AuthResponse, LocalAuthRequest, UserOut

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


def build_auth_response(user: User) -> AuthResponse:
    """Issue a session token and point provisional users at username selection."""
    is_provisional = user.is_provisional
    return AuthResponse(
        access_token=create_access_token(user.id, user.identity_hash),
        token_type="bearer",
        is_provisional=is_provisional,
        next="/username" if is_provisional else "/",
        user=UserOut.model_validate(user),
    )


def _ensure_local_auth_enabled() -> None:
    if not settings.local_auth_enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.get(
    "/callback",
    summary="Complete sign-in from the external identity provider",
    response_model=AuthResponse,
)
def auth_callback(
    resolver: IdentityResolverDep,
    external_principal_id: str = Query(
        ...,
        description="Subject identifier asserted by the identity provider",
    ),
) -> AuthResponse:
    """Resolve the external principal to a local user and start a session.

    First-time principals get a provisional account and are sent to choose a
    username; returning established users go straight home.
    """
    resolution = resolver.resolve(external_principal_id)
    return build_auth_response(resolution.user)


@router.post(
    "/register",
    summary="Register a username without the identity provider",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
def register_user(payload: LocalAuthRequest, resolver: IdentityResolverDep) -> AuthResponse:
    """Create an established user directly (only when local auth is enabled)."""
    _ensure_local_auth_enabled()
    user = resolver.register_local(payload.username)
    return build_auth_response(user)


@router.post(
    "/login",
    summary="Log in by username without the identity provider",
    response_model=AuthResponse,
)
def login_user(payload: LocalAuthRequest, resolver: IdentityResolverDep) -> AuthResponse:
    """Start a session for an existing user (only when local auth is enabled)."""
    _ensure_local_auth_enabled()
    user = resolver.login_local(payload.username)
    return build_auth_response(user)


@router.post(
    "/logout",
    summary="End the current session",
    status_code=status.HTTP_204_NO_CONTENT,
)
def logout(current_user: OptionalUserDep) -> None:
    """Acknowledge a logout; the client discards its bearer token.

    Session tokens are stateless, so there is nothing to revoke server-side.
    Calling this without a valid session is not an error.
    """
    if current_user is not None:
        logger.info("User %s logged out", current_user.id)
