"""Data access layer over SQLAlchemy sessions."""

from .post_repo import PostRepository
from .user_repo import UserRepository

__all__ = ["PostRepository", "UserRepository"]
