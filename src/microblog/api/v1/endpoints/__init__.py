# src/microblog/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1.

Handlers are plain functions: they block on the database session and on
retry backoff, so Starlette runs them in its threadpool.
"""

from .auth import router as auth_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "posts_router",
    "users_router",
]
