# src/microblog/db/__init__.py
"""Database configuration and utilities."""

from .errors import is_unique_violation
from .retry import retry_transient
from .session import SessionLocal, get_db

__all__ = ["get_db", "SessionLocal", "is_unique_violation", "retry_transient"]
