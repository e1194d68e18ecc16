"""Feed ordering.

Every criterion is a total order: a primary key plus explicit tie-breaks, so
two posts never compare equal unless they are the same row. The in-memory
``rank`` and the SQL ``order_by_clauses`` describe the same order.
"""
from __future__ import annotations

import enum
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from microblog.db.time import as_utc
from microblog.models.post import Post


class SortCriterion(str, enum.Enum):
    """Recognised values of the ``sort`` query parameter."""

    RECENCY_DESC = "recency-desc"
    RECENCY_ASC = "recency-asc"
    LIKES_DESC = "likes-desc"
    LIKES_ASC = "likes-asc"


DEFAULT_CRITERION = SortCriterion.RECENCY_DESC


def parse_criterion(value: str | SortCriterion | None) -> SortCriterion:
    """Map a raw sort string to a criterion, falling back to the default."""
    if isinstance(value, SortCriterion):
        return value
    if not value:
        return DEFAULT_CRITERION
    try:
        return SortCriterion(value.strip().lower())
    except ValueError:
        return DEFAULT_CRITERION


def _timestamp(post: Post) -> datetime:
    return as_utc(post.timestamp)


def _sort_key(criterion: SortCriterion) -> Any:
    if criterion in (SortCriterion.RECENCY_DESC, SortCriterion.RECENCY_ASC):
        return lambda post: (_timestamp(post), post.id)
    return lambda post: (post.like_count, _timestamp(post), post.id)


def rank(posts: Iterable[Post], criterion: str | SortCriterion | None = None) -> list[Post]:
    """Return posts ordered by the given criterion.

    Args:
        posts: Posts to order; the input is not modified.
        criterion: A ``SortCriterion`` or its string value. Unknown values
            fall back to ``recency-desc``.

    Returns:
        A new list in ranked order.
    """
    resolved = parse_criterion(criterion)
    descending = resolved in (SortCriterion.RECENCY_DESC, SortCriterion.LIKES_DESC)
    return sorted(posts, key=_sort_key(resolved), reverse=descending)


def order_by_clauses(criterion: str | SortCriterion | None = None) -> list[Any]:
    """Return SQLAlchemy ORDER BY clauses matching ``rank`` for a criterion."""
    resolved = parse_criterion(criterion)
    if resolved is SortCriterion.RECENCY_DESC:
        return [Post.timestamp.desc(), Post.id.desc()]
    if resolved is SortCriterion.RECENCY_ASC:
        return [Post.timestamp.asc(), Post.id.asc()]
    if resolved is SortCriterion.LIKES_DESC:
        return [Post.like_count.desc(), Post.timestamp.desc(), Post.id.desc()]
    return [Post.like_count.asc(), Post.timestamp.asc(), Post.id.asc()]
