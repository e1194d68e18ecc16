# src/microblog/schemas/__init__.py
"""Pydantic schemas for request validation and responses."""

from .post import LikeResponse, PostCreate, PostOut, PostUpdate
from .user import (
    AuthResponse,
    LocalAuthRequest,
    ProfileResponse,
    UsernameRequest,
    UserOut,
)

__all__ = [
    "AuthResponse",
    "LikeResponse",
    "LocalAuthRequest",
    "PostCreate",
    "PostOut",
    "PostUpdate",
    "ProfileResponse",
    "UserOut",
    "UsernameRequest",
]
