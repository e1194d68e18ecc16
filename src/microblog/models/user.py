# src/microblog/models/user.py
"""SQLAlchemy models for local user accounts."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from microblog.db.session import Base
from microblog.db.time import UTCDateTime, utcnow


class UserStatus(str, enum.Enum):
    """Lifecycle state of a local account."""

    # Created on first sight of an external principal; username not chosen yet.
    PROVISIONAL = "provisional"
    ESTABLISHED = "established"


class User(Base):
    """Local account linked to an external identity by a one-way hash.

    While provisional the username is the identity hash itself; it is replaced
    exactly once when the human picks a permanent username.
    """

    __tablename__ = "users"
    # Never hand a deleted account's id to a new user.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    identity_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus, name="user_status", native_enum=False, length=16),
        nullable=False,
        default=UserStatus.PROVISIONAL,
    )
    member_since: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_established(self) -> bool:
        """Return True once the user has chosen a permanent username."""
        return self.status == UserStatus.ESTABLISHED

    @property
    def is_provisional(self) -> bool:
        """Return True while the username is still the identity hash."""
        return not self.is_established
