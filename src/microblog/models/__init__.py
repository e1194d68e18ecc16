# src/microblog/models/__init__.py
"""SQLAlchemy models for the Microblog application."""

from .like import PostLike
from .post import Post
from .user import User, UserStatus

__all__ = [
    "Post",
    "PostLike",
    "User", "UserStatus",
]
