"""Account endpoints: username selection, profile and account deletion."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from microblog.api.v1.dependencies import (
    CurrentUserDep,
    EstablishedUserDep,
    IdentityResolverDep,
    OptionalUserDep,
    PostRepoDep,
    UserRepoDep,
)
from microblog.api.v1.endpoints.auth import build_auth_response
from microblog.core.settings import settings
from microblog.schemas.user import AuthResponse, ProfileResponse, UsernameRequest, UserOut
from microblog.services import post_service

router = APIRouter(tags=["users"])


@router.post("/username", response_model=AuthResponse)
def choose_username(
    payload: UsernameRequest,
    current_user: CurrentUserDep,
    resolver: IdentityResolverDep,
) -> AuthResponse:
    """Pick the permanent username for the caller's provisional account."""
    user = resolver.finalize_username(current_user.identity_hash, payload.username)
    return build_auth_response(user)


@router.get("/users/me", response_model=UserOut)
def read_current_user(current_user: CurrentUserDep) -> UserOut:
    """Return the caller's account, provisional or established."""
    return UserOut.model_validate(current_user)


@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    current_user: EstablishedUserDep,
    posts: PostRepoDep,
    sort: str | None = Query(None, description="recency-desc, recency-asc, likes-desc or likes-asc"),
) -> ProfileResponse:
    """Return the caller's account with their own posts in the requested order."""
    ranked = post_service.list_profile(posts, current_user, sort or settings.default_sort)
    return ProfileResponse(
        user=UserOut.model_validate(current_user),
        posts=[post_service.to_post_out(post) for post in ranked],
    )


@router.delete("/account", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    current_user: OptionalUserDep,
    users: UserRepoDep,
    posts: PostRepoDep,
) -> None:
    """Delete the caller's account and every post they wrote.

    The session token stops working afterwards because it names a user that
    no longer exists.
    """
    post_service.delete_account(users, posts, current_user)
