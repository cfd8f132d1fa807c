"""User registration."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import User
from ..utils.datetime import utc_now
from .errors import LedgerUpdateFailed

logger = logging.getLogger(__name__)


def _find_by_email(session: Session, email: str) -> Optional[User]:
    return session.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register_user(session: Session, *, email: str, name: str) -> User:
    """Return the user for ``email``, creating it on first sight.

    A concurrent registration of the same email trips the unique constraint;
    the session is rolled back and the winner's row returned instead.
    """

    normalized = email.strip().lower()
    user = _find_by_email(session, normalized)
    if user is not None:
        return user

    user = User(email=normalized, name=name, created_at=utc_now())
    session.add(user)
    try:
        session.flush()
    except IntegrityError as exc:
        session.rollback()
        existing = _find_by_email(session, normalized)
        if existing is None:
            raise LedgerUpdateFailed("Registration failed; please retry the operation.") from exc
        logger.info("user %s registered concurrently; returning existing row", normalized)
        return existing
    except SQLAlchemyError as exc:
        logger.exception("registration failed for %s", normalized)
        raise LedgerUpdateFailed("Registration failed; please retry the operation.") from exc

    session.refresh(user)
    return user
