"""Linking external identities to local users.

A principal seen for the first time gets a provisional user whose username is
the identity hash. The human then picks a permanent username once; until then
the account may not post, like or browse as an established user.
"""
from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from microblog.core.security import hash_identity
from microblog.db.errors import is_unique_violation
from microblog.models.user import User, UserStatus
from microblog.repositories.user_repo import UserRepository
from microblog.services.errors import (
    NotFoundError,
    StorageError,
    UsernameTakenError,
    ValidationError,
)

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 32
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,%d}$" % USERNAME_MAX_LENGTH)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving an external principal."""

    user: User
    is_provisional: bool


def normalize_username(raw: str) -> str:
    """Strip surrounding whitespace and validate the username format."""
    username = (raw or "").strip()
    if not USERNAME_PATTERN.fullmatch(username):
        raise ValidationError(
            "Usernames are 1-32 letters, digits, '.', '_' or '-'",
            reason="invalid_username",
        )
    return username


class IdentityResolver:
    """Resolve external principals and finalize usernames.

    Each public method commits its own transaction on success and rolls back
    on failure, so no half-applied state is ever visible.
    """

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    @property
    def session(self) -> Session:
        return self.users.session

    def resolve(self, external_principal_id: str) -> Resolution:
        """Map an external principal to a local user, provisioning one if needed.

        Args:
            external_principal_id: Opaque subject identifier from the provider.

        Returns:
            The user and whether it is still provisional.

        Raises:
            ValidationError: If the principal id is empty.
            StorageError: If the user could not be created or read back.
        """
        if not external_principal_id or not external_principal_id.strip():
            raise ValidationError("Missing external principal", reason="invalid_principal")

        identity_hash = hash_identity(external_principal_id)
        user = self.users.get_by_identity_hash(identity_hash)
        if user is not None:
            return Resolution(user=user, is_provisional=user.is_provisional)

        try:
            user = self.users.create(
                username=identity_hash,
                identity_hash=identity_hash,
                status=UserStatus.PROVISIONAL,
            )
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if not is_unique_violation(exc):
                raise StorageError("Could not provision user") from exc
            # Another request provisioned the same principal first.
            user = self.users.get_by_identity_hash(identity_hash)
            if user is None:
                raise StorageError("Could not provision user") from exc
            return Resolution(user=user, is_provisional=user.is_provisional)

        logger.info("Provisioned user %s for a new external principal", user.id)
        return Resolution(user=user, is_provisional=True)

    def finalize_username(self, identity_hash: str, chosen_username: str) -> User:
        """Give a provisional user its permanent username.

        Repeating the call with the username already set is a no-op.

        Raises:
            ValidationError: If the username is malformed or a different
                username was already chosen.
            UsernameTakenError: If another user owns the username.
            NotFoundError: If no user matches ``identity_hash``.
        """
        username = normalize_username(chosen_username)

        user = self.users.get_by_identity_hash(identity_hash)
        if user is None:
            raise NotFoundError("User not found", reason="user_not_found")

        if user.is_established:
            if user.username == username:
                return user
            raise ValidationError(
                "Username has already been chosen",
                reason="username_already_set",
            )

        owner = self.users.get_by_username(username)
        if owner is not None and owner.id != user.id:
            raise UsernameTakenError("Username already exists")

        try:
            updated = self.users.establish_username(identity_hash, username)
            if updated != 1:
                # Finalized concurrently; treat the row as unchanged.
                self.session.rollback()
                raise ValidationError(
                    "Username has already been chosen",
                    reason="username_already_set",
                )
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if is_unique_violation(exc):
                raise UsernameTakenError("Username already exists") from exc
            raise StorageError("Could not update username") from exc

        self.session.refresh(user)
        logger.info("User %s finalized username %s", user.id, user.username)
        return user

    def register_local(self, chosen_username: str) -> User:
        """Create an established user directly, without an external principal."""
        username = normalize_username(chosen_username)
        if self.users.get_by_username(username) is not None:
            raise UsernameTakenError("Username already exists")

        # Random so it can never match the hash of a real external principal.
        identity_hash = hash_identity(f"local:{secrets.token_hex(16)}")
        try:
            user = self.users.create(
                username=username,
                identity_hash=identity_hash,
                status=UserStatus.ESTABLISHED,
            )
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if is_unique_violation(exc):
                raise UsernameTakenError("Username already exists") from exc
            raise StorageError("Could not register user") from exc

        logger.info("Registered local user %s", user.id)
        return user

    def login_local(self, username: str) -> User:
        """Return the established user with this username."""
        user = self.users.get_by_username((username or "").strip())
        if user is None or not user.is_established:
            raise NotFoundError("Invalid username", reason="invalid_username")
        return user
