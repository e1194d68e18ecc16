"""Identity hashing and session token helpers."""
from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from microblog.core.settings import settings

# Claim carrying the account's identity hash alongside the numeric subject.
IDENTITY_CLAIM = "idh"


def hash_identity(external_principal_id: str) -> str:
    """Return a SHA-256 hex digest of an external principal identifier.

    The raw identifier from the identity provider is never stored; the digest
    is enough to recognise a returning principal.
    """
    return hashlib.sha256(external_principal_id.encode("utf-8")).hexdigest()


def create_access_token(
    user_id: int,
    identity_hash: str,
    extra_claims: dict[str, str] | None = None,
) -> str:
    """Create a signed session token bound to one local account.

    The identity hash is embedded so a token cannot authenticate a different
    account that later receives the same numeric id.
    """
    to_encode: dict[str, object] = {"sub": str(user_id), IDENTITY_CLAIM: identity_hash}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> tuple[int, str] | None:
    """Return ``(user_id, identity_hash)`` from a session token, or None.

    Expired, tampered and malformed tokens, tokens without a numeric subject
    and tokens without the identity claim all decode to None.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    identity_hash = payload.get(IDENTITY_CLAIM)
    if subject is None or not isinstance(identity_hash, str):
        return None
    try:
        return int(subject), identity_hash
    except (TypeError, ValueError):
        return None
