"""Data access helpers for working with users."""
from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from microblog.db.retry import retry_transient
from microblog.db.time import utcnow
from microblog.models.user import User, UserStatus

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    @retry_transient
    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by primary key."""
        return self.session.get(User, user_id)

    @retry_transient
    def get_by_identity_hash(self, identity_hash: str) -> User | None:
        """Return the user linked to an external identity hash."""
        result = self.session.execute(select(User).where(User.identity_hash == identity_hash))
        return result.scalars().first()

    @retry_transient
    def get_by_username(self, username: str) -> User | None:
        """Return a user by exact, case-sensitive username."""
        result = self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    def create(
        self,
        *,
        username: str,
        identity_hash: str,
        status: UserStatus,
        avatar_url: str | None = None,
    ) -> User:
        """Insert a new user and flush so uniqueness is checked immediately."""
        user = User(
            username=username,
            identity_hash=identity_hash,
            status=status,
            member_since=utcnow(),
            avatar_url=avatar_url,
        )
        self.session.add(user)
        self.session.flush()
        return user

    def establish_username(self, identity_hash: str, username: str) -> int:
        """Set the permanent username on the row matching ``identity_hash``.

        Returns:
            Number of rows updated; only provisional rows are eligible.
        """
        result = self.session.execute(
            update(User)
            .where(
                User.identity_hash == identity_hash,
                User.status == UserStatus.PROVISIONAL,
            )
            .values(username=username, status=UserStatus.ESTABLISHED)
            .execution_options(synchronize_session="fetch")
        )
        self.session.flush()
        return result.rowcount or 0

    def delete(self, user_id: int) -> int:
        """Delete a user row and return the number of rows removed."""
        result = self.session.execute(
            delete(User)
            .where(User.id == user_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
