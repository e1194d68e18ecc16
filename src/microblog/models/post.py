# src/microblog/models/post.py
"""SQLAlchemy models for posts."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from microblog.db.session import Base
from microblog.db.time import UTCDateTime, utcnow


class Post(Base):
    """Short titled text published by an established user."""

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("like_count >= 0", name="ck_posts_like_count_non_negative"),
        Index("ix_posts_author_id", "author_id"),
        Index("ix_posts_timestamp", "timestamp"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Username copied at posting time, for display only.
    author: Mapped[str] = mapped_column(String(64), nullable=False)
    # Ownership checks go through the stable numeric id.
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Creation time, replaced by the edit time on every edit.
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
