"""Bounded retry for read-only store calls."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError

from microblog.core.settings import settings
from microblog.services.errors import StorageError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

TRANSIENT_ERRORS: tuple[type[SQLAlchemyError], ...] = (OperationalError, DisconnectionError)


def retry_transient(func: Callable[P, R]) -> Callable[P, R]:
    """Retry a repository read when the database reports a transient failure.

    The wrapped callable must be a method of an object exposing ``session``;
    the session is rolled back between attempts so the next try starts on a
    fresh connection. Only reads may be wrapped: a retried write could apply
    twice.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        owner: Any = args[0] if args else None
        attempts = max(1, settings.store_retry_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except TRANSIENT_ERRORS as exc:
                session = getattr(owner, "session", None)
                if session is not None:
                    session.rollback()
                if attempt == attempts:
                    logger.error(
                        "Store call %s failed after %d attempts",
                        func.__qualname__,
                        attempts,
                        exc_info=True,
                    )
                    raise StorageError("Storage backend unavailable") from exc
                logger.warning(
                    "Transient store failure in %s (attempt %d/%d): %s",
                    func.__qualname__,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(settings.store_retry_backoff_seconds * attempt)
        raise AssertionError("unreachable")  # pragma: no cover

    return wrapper
