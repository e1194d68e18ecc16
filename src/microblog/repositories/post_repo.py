"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from microblog.db.retry import retry_transient
from microblog.db.time import utcnow
from microblog.models.like import PostLike
from microblog.models.post import Post
from microblog.services.ranking import SortCriterion, order_by_clauses

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    @retry_transient
    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        result = self.session.execute(select(Post).where(Post.id == post_id))
        return result.scalars().first()

    @retry_transient
    def list_posts(
        self,
        *,
        author_id: int | None = None,
        criterion: SortCriterion | str | None = None,
        limit: int | None = None,
    ) -> list[Post]:
        """Return posts in ranked order, optionally restricted to one author."""
        stmt = select(Post)
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)
        stmt = stmt.order_by(*order_by_clauses(criterion))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = self.session.execute(stmt)
        return list(result.scalars())

    def create(self, *, title: str, content: str, author: str, author_id: int) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(
            title=title,
            content=content,
            author=author,
            author_id=author_id,
            timestamp=utcnow(),
            edited=False,
            like_count=0,
        )
        self.session.add(post)
        self.session.flush()
        return post

    def update_content(self, post_id: int, *, title: str, content: str) -> int:
        """Replace title and content, stamp the edit time and mark the post edited."""
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(title=title, content=content, timestamp=utcnow(), edited=True)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    def increment_likes(self, post_id: int) -> int:
        """Atomically add one to the like counter; returns rows updated."""
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(like_count=Post.like_count + 1)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    @retry_transient
    def has_liked(self, post_id: int, user_id: int) -> bool:
        """Return True if the like ledger already records this pair."""
        return self.session.get(PostLike, (post_id, user_id)) is not None

    def record_like(self, post_id: int, user_id: int) -> None:
        """Add a ledger row; the composite key rejects duplicates."""
        self.session.add(PostLike(post_id=post_id, user_id=user_id))
        self.session.flush()

    def delete(self, post_id: int) -> int:
        """Delete a post and return the number of rows removed."""
        result = self.session.execute(
            delete(Post)
            .where(Post.id == post_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    def delete_by_author(self, *, author_id: int, author: str) -> int:
        """Delete every post owned by a user and return how many went."""
        result = self.session.execute(
            delete(Post)
            .where(or_(Post.author_id == author_id, Post.author == author))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
