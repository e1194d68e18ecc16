"""Service-level operations on posts and accounts.

Every mutating operation follows the same sequence: look the target up,
check the caller's rights, then mutate and commit. Nothing is written
until all checks have passed.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from microblog.core.settings import settings
from microblog.db.errors import is_unique_violation
from microblog.models import Post, User
from microblog.repositories.post_repo import PostRepository
from microblog.repositories.user_repo import UserRepository
from microblog.schemas.post import PostOut
from microblog.services import authorization
from microblog.services.errors import NotFoundError, StorageError, ValidationError
from microblog.services.ranking import SortCriterion, parse_criterion

logger = logging.getLogger(__name__)


def _clean_text(value: str, *, field: str, max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field.capitalize()} must not be empty", reason=f"empty_{field}")
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{field.capitalize()} must be at most {max_length} characters",
            reason=f"{field}_too_long",
        )
    return cleaned


def _validated(title: str, content: str) -> tuple[str, str]:
    return (
        _clean_text(title, field="title", max_length=settings.post_title_max_length),
        _clean_text(content, field="content", max_length=settings.post_content_max_length),
    )


def get_post(repo: PostRepository, post_id: int) -> Post:
    """Return a post or raise ``NotFoundError``."""
    post = repo.get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found", reason="post_not_found")
    return post


def list_feed(repo: PostRepository, criterion: str | SortCriterion | None = None) -> list[Post]:
    """Return every post in ranked order."""
    return repo.list_posts(criterion=parse_criterion(criterion))


def list_profile(
    repo: PostRepository,
    actor: User | None,
    criterion: str | SortCriterion | None = None,
) -> list[Post]:
    """Return the caller's own posts in ranked order."""
    user = authorization.require_established(actor)
    return repo.list_posts(author_id=user.id, criterion=parse_criterion(criterion))


def create_post(repo: PostRepository, actor: User | None, *, title: str, content: str) -> Post:
    """Publish a new post authored by ``actor``.

    Raises:
        AuthenticationRequired: If no user is attached to the request.
        AuthorizationError: If the user has not chosen a username yet.
        ValidationError: If the title or content is empty or too long.
    """
    user = authorization.require_established(actor)
    clean_title, clean_content = _validated(title, content)

    post = repo.create(
        title=clean_title,
        content=clean_content,
        author=user.username,
        author_id=user.id,
    )
    repo.session.commit()
    logger.info("User %s created post %s", user.id, post.id)
    return post


def edit_post(
    repo: PostRepository,
    actor: User | None,
    post_id: int,
    *,
    title: str,
    content: str,
) -> Post:
    """Replace a post's title and content; only the author may do this."""
    post = get_post(repo, post_id)
    user = authorization.require_edit(actor, post)
    clean_title, clean_content = _validated(title, content)

    if repo.update_content(post_id, title=clean_title, content=clean_content) == 0:
        repo.session.rollback()
        raise NotFoundError("Post not found", reason="post_not_found")
    repo.session.commit()
    repo.session.refresh(post)
    logger.info("User %s edited post %s", user.id, post_id)
    return post


def like_post(repo: PostRepository, actor: User | None, post_id: int) -> Post:
    """Add one like to someone else's post.

    Repeat likes from the same user each count unless ``ALLOW_REPEAT_LIKES``
    is turned off, in which case the second like is rejected.
    """
    post = get_post(repo, post_id)
    user = authorization.require_like(actor, post)

    if not settings.allow_repeat_likes:
        if repo.has_liked(post_id, user.id):
            raise ValidationError("You already liked this post", reason="already_liked")
        try:
            repo.record_like(post_id, user.id)
        except IntegrityError as exc:
            repo.session.rollback()
            if is_unique_violation(exc):
                raise ValidationError(
                    "You already liked this post",
                    reason="already_liked",
                ) from exc
            # Foreign key failure: the post vanished between lookup and insert.
            raise NotFoundError("Post not found", reason="post_not_found") from exc

    if repo.increment_likes(post_id) == 0:
        repo.session.rollback()
        raise NotFoundError("Post not found", reason="post_not_found")
    repo.session.commit()
    repo.session.refresh(post)
    logger.info("User %s liked post %s (now %d)", user.id, post_id, post.like_count)
    return post


def delete_post(repo: PostRepository, actor: User | None, post_id: int) -> None:
    """Delete a post owned by ``actor``.

    A post that is already gone, including one removed by a concurrent
    request, is reported as not found.
    """
    post = get_post(repo, post_id)
    user = authorization.require_delete_post(actor, post)

    if repo.delete(post_id) == 0:
        repo.session.rollback()
        raise NotFoundError("Post not found", reason="post_not_found")
    repo.session.commit()
    logger.info("User %s deleted post %s", user.id, post_id)


def delete_account(users: UserRepository, posts: PostRepository, actor: User | None) -> int:
    """Delete the caller's posts and then the caller's account.

    Returns:
        Number of posts removed along with the account.
    """
    user = authorization.require_delete_account(actor)
    user_id = user.id
    username = user.username

    try:
        removed = posts.delete_by_author(author_id=user_id, author=username)
        if users.delete(user_id) == 0:
            users.session.rollback()
            raise NotFoundError("User not found", reason="user_not_found")
        users.session.commit()
    except IntegrityError as exc:
        users.session.rollback()
        raise StorageError("Could not delete account") from exc

    logger.info("Deleted account %s and %d post(s)", user_id, removed)
    return removed


def to_post_out(post: Post) -> PostOut:
    """Convert a Post ORM instance to an API schema."""
    return PostOut.model_validate(post)
