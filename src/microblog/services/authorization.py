"""Access policy for mutating actions on posts and accounts.

The ``can_*`` predicates are pure and never touch the store. The
``require_*`` variants raise ``AuthenticationRequired`` or
``AuthorizationError`` so callers can stop before any mutation.
"""

from __future__ import annotations

import logging

from microblog.models import Post, User
from microblog.services.errors import AuthenticationRequired, AuthorizationError

logger = logging.getLogger(__name__)


def is_established(actor: User | None) -> bool:
    """Return True when a verified user with a chosen username is present."""
    return actor is not None and actor.is_established


def is_author(actor: User | None, post: Post) -> bool:
    return actor is not None and post.author_id == actor.id


def can_like(actor: User | None, post: Post) -> bool:
    """Established users may like any post except their own."""
    return is_established(actor) and not is_author(actor, post)


def can_edit(actor: User | None, post: Post) -> bool:
    return is_established(actor) and is_author(actor, post)


def can_delete_post(actor: User | None, post: Post) -> bool:
    return is_established(actor) and is_author(actor, post)


def can_delete_account(actor: User | None) -> bool:
    return is_established(actor)


def require_established(actor: User | None) -> User:
    """Return the actor or raise if it is missing or still provisional."""
    if actor is None:
        raise AuthenticationRequired("You must log in to do that")
    if not actor.is_established:
        raise AuthorizationError(
            "Choose a username before continuing",
            reason="username_required",
        )
    return actor


def require_like(actor: User | None, post: Post) -> User:
    user = require_established(actor)
    if not can_like(user, post):
        logger.debug("User %s rejected liking own post %s", user.id, post.id)
        raise AuthorizationError("You cannot like your own post", reason="self_like")
    return user


def require_edit(actor: User | None, post: Post) -> User:
    user = require_established(actor)
    if not can_edit(user, post):
        logger.debug("User %s rejected editing post %s", user.id, post.id)
        raise AuthorizationError("You can only edit your own posts", reason="not_author")
    return user


def require_delete_post(actor: User | None, post: Post) -> User:
    user = require_established(actor)
    if not can_delete_post(user, post):
        logger.debug("User %s rejected deleting post %s", user.id, post.id)
        raise AuthorizationError("You can only delete your own posts", reason="not_author")
    return user


def require_delete_account(actor: User | None) -> User:
    return require_established(actor)
