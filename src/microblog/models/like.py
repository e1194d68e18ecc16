"""Ledger of likes, written only when repeat likes are disabled."""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from microblog.db.session import Base


class PostLike(Base):
    """One row per (post, user) pair that has liked the post."""

    __tablename__ = "post_likes"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate likes from the same user.
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
