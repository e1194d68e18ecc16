"""Shared API dependencies: database session and the session guard."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from microblog.api.v1.errors import to_http_exception
from microblog.core.security import decode_access_token
from microblog.db.session import get_db
from microblog.models import User
from microblog.repositories.post_repo import PostRepository
from microblog.repositories.user_repo import UserRepository
from microblog.services.authorization import require_established
from microblog.services.errors import AuthenticationRequired, MicroblogError
from microblog.services.identity import IdentityResolver

# Missing credentials are not an error here; routes decide what they need.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_user_repo(db: SessionDep) -> UserRepository:
    """Return a user repository bound to the request session."""
    return UserRepository(db)


def get_post_repo(db: SessionDep) -> PostRepository:
    """Return a post repository bound to the request session."""
    return PostRepository(db)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repo)]
PostRepoDep = Annotated[PostRepository, Depends(get_post_repo)]


def get_identity_resolver(users: UserRepoDep) -> IdentityResolver:
    """Return an identity resolver bound to the request session."""
    return IdentityResolver(users)


IdentityResolverDep = Annotated[IdentityResolver, Depends(get_identity_resolver)]


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    users: UserRepoDep,
) -> User | None:
    """Return the user attached to the request, if any.

    Invalid or expired tokens, tokens naming a deleted user and tokens whose
    identity claim does not match the account all count as no user at all,
    so a stale session behaves like a logged-out one.
    """
    if credentials is None:
        return None
    claims = decode_access_token(credentials.credentials)
    if claims is None:
        return None
    user_id, identity_hash = claims
    user = users.get_by_id(user_id)
    if user is None or user.identity_hash != identity_hash:
        return None
    return user


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_current_user(user: OptionalUserDep) -> User:
    """Return the verified user, provisional or not.

    Raises:
        HTTPException: 401 with reason ``login_required`` when absent.
    """
    if user is None:
        raise to_http_exception(AuthenticationRequired("You must log in to do that"))
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_established_user(user: OptionalUserDep) -> User:
    """Return the verified user once a username has been chosen.

    Raises:
        HTTPException: 401 ``login_required`` without a user, 403
            ``username_required`` for a provisional user.
    """
    try:
        return require_established(user)
    except MicroblogError as err:
        raise to_http_exception(err) from err


EstablishedUserDep = Annotated[User, Depends(get_established_user)]
